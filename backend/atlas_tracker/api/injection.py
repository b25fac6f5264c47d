from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from atlas_tracker.core.settings import Settings, get_settings
from atlas_tracker.models.enums import CompoundCategory, Modality
from atlas_tracker.models.injection import (
    CatalogResponse,
    CategoryResponse,
    HistoryRequest,
    InjectionEvent,
    IntervalDecision,
    IntervalRequest,
    QualityResult,
    RecommendationResponse,
    RotationCheck,
    SiteGroupOut,
    SiteOut,
    SiteUsage,
)
from atlas_tracker.services import interval_guard, rotation_quality
from atlas_tracker.services.injection_sites import (
    Site,
    default_site,
    get_site,
    grouped_sites,
    modality_for_category,
    opposite_site,
    sites_for,
)
from atlas_tracker.services.rotation_service import (
    last_used_site,
    recommend_next,
    site_usage_stats,
    trim_history,
    validate_rotation,
)

router = APIRouter()


def _site_out(site: Site) -> SiteOut:
    opposite = opposite_site(site)
    return SiteOut(
        id=site.id,
        display_name=site.display_name,
        short_name=site.short_name,
        body_part=site.body_part,
        laterality=site.laterality,
        modality=site.modality,
        opposite_id=opposite.id if opposite else None,
    )


def _now(payload: HistoryRequest) -> datetime:
    return payload.now or datetime.now(timezone.utc)


def _recent(payload: HistoryRequest, settings: Settings) -> List[InjectionEvent]:
    return trim_history(payload.history, settings.rotation.history_lookback)


def _long(payload: HistoryRequest, settings: Settings) -> List[InjectionEvent]:
    return trim_history(payload.history, settings.rotation.stats_lookback)


@router.get("/sites/{modality}", response_model=CatalogResponse)
def get_catalog(modality: Modality):
    """Site catalog for one modality, with the cold-start default and picker groups."""
    return CatalogResponse(
        modality=modality,
        default_site_id=default_site(modality).id,
        sites=[_site_out(s) for s in sites_for(modality)],
        groups=[
            SiteGroupOut(name=name, site_ids=[s.id for s in sites])
            for name, sites in grouped_sites(modality)
        ],
    )


@router.get("/category/{category}", response_model=CategoryResponse)
def category_modality(category: CompoundCategory):
    """Injection modality implied by a compound category, if any."""
    modality: Optional[Modality] = modality_for_category(category.value)
    return CategoryResponse(
        category=category,
        modality=modality,
        default_site_id=default_site(modality).id if modality else None,
    )


@router.post("/recommend", response_model=RecommendationResponse)
def recommend(payload: HistoryRequest, settings: Settings = Depends(get_settings)):
    history = _recent(payload, settings)
    site_id = recommend_next(payload.modality, history, _now(payload), settings.rotation)
    site = get_site(payload.modality, site_id)
    last = last_used_site(payload.modality, history)
    return RecommendationResponse(
        modality=payload.modality,
        site=_site_out(site),
        last_site=_site_out(last) if last else None,
    )


@router.post("/interval", response_model=IntervalDecision)
def interval(payload: IntervalRequest, settings: Settings = Depends(get_settings)):
    if get_site(payload.modality, payload.site_id) is None:
        raise HTTPException(
            status_code=404,
            detail=f"Unknown site '{payload.site_id}' for modality '{payload.modality.value}'",
        )
    return interval_guard.check_interval(
        payload.site_id,
        payload.modality,
        _recent(payload, settings),
        _now(payload),
        settings.rotation,
    )


@router.post("/available", response_model=List[SiteOut])
def available(payload: HistoryRequest, settings: Settings = Depends(get_settings)):
    sites = interval_guard.available_sites(
        payload.modality, _recent(payload, settings), _now(payload), settings.rotation
    )
    return [_site_out(s) for s in sites]


@router.post("/blocked", response_model=List[IntervalDecision])
def blocked(payload: HistoryRequest, settings: Settings = Depends(get_settings)):
    return interval_guard.blocked_sites(
        payload.modality, _recent(payload, settings), _now(payload), settings.rotation
    )


@router.post("/quality", response_model=QualityResult)
def quality(payload: HistoryRequest, settings: Settings = Depends(get_settings)):
    return rotation_quality.score(payload.modality, _long(payload, settings), settings.rotation)


@router.post("/stats", response_model=List[SiteUsage])
def stats(payload: HistoryRequest, settings: Settings = Depends(get_settings)):
    return site_usage_stats(payload.modality, _long(payload, settings))


@router.post("/validate", response_model=RotationCheck)
def validate(payload: HistoryRequest, settings: Settings = Depends(get_settings)):
    return validate_rotation(payload.modality, _recent(payload, settings))
