import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from atlas_tracker import __version__
from atlas_tracker.api import api_router
from atlas_tracker.core.logging import configure_logging
from atlas_tracker.core.settings import get_settings

configure_logging()
settings = get_settings()
logger = logging.getLogger(__name__)

app = FastAPI(title="Atlas Tracker", version=__version__)


def _collect_cors_origins() -> list[str]:
    default_origins = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    collected: list[str] = []
    for origin in (*default_origins, *settings.security.cors_origins):
        if origin and origin not in collected:
            collected.append(origin)

    return collected


app.add_middleware(
    CORSMiddleware,
    allow_origins=_collect_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")
logger.info("Rotation engine ready (lookback %s/%s, tz %s)",
            settings.rotation.history_lookback, settings.rotation.stats_lookback, settings.rotation.timezone)


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=settings.server.host, port=settings.server.port)


if __name__ == "__main__":
    run()
