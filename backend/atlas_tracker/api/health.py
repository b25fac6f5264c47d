from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response, Request

from atlas_tracker import __version__
from atlas_tracker.core.settings import get_settings, Settings

router = APIRouter()

_start_time = datetime.now(timezone.utc)


def _uptime_seconds() -> float:
    return (datetime.now(timezone.utc) - _start_time).total_seconds()


@router.api_route("/", methods=["GET", "HEAD"], summary="Liveness check", response_model=None)
async def health(request: Request):
    if request.method == "HEAD":
        return Response(status_code=200)
    return {"ok": True}


@router.get("/full", summary="Full health check")
async def full_health(
    settings: Settings = Depends(get_settings),
) -> dict:
    return {
        "ok": True,
        "uptime_seconds": _uptime_seconds(),
        "version": __version__,
        "server": {"host": settings.server.host, "port": settings.server.port},
        "rotation": {
            "history_lookback": settings.rotation.history_lookback,
            "stats_lookback": settings.rotation.stats_lookback,
            "timezone": settings.rotation.timezone,
        },
    }
