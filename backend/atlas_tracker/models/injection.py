from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from atlas_tracker.models.enums import CompoundCategory, Laterality, Modality, RotationRating


class InjectionEvent(BaseModel):
    """One logged injection. Naive timestamps are taken as UTC."""

    model_config = ConfigDict(frozen=True)

    site_id: str = Field(..., description="Catalog id of the site, e.g. 'glute_left'")
    timestamp: datetime

    @field_validator("timestamp")
    def _ensure_aware(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class IntervalDecision(BaseModel):
    allowed: bool
    site_id: str
    hours_remaining: Optional[int] = Field(None, description="Hours until the site has recovered (blocked only)")
    hours_since_last: Optional[int] = None
    last_used: Optional[datetime] = None
    wait_text: Optional[str] = Field(None, description="Human readable wait, e.g. '1 day, 14 hours'")


class QualityFactor(BaseModel):
    name: str
    score: float = Field(..., ge=0, le=100)
    weight: float
    feedback: str


class QualityResult(BaseModel):
    score: int = Field(..., ge=0, le=100)
    rating: RotationRating
    factors: List[QualityFactor] = Field(default_factory=list)


class SiteUsage(BaseModel):
    site_id: str
    display_name: str
    count: int = 0
    last_used: Optional[datetime] = None


class RotationCheck(BaseModel):
    is_good: bool
    message: str


# --- API schemas ---

class SiteOut(BaseModel):
    id: str
    display_name: str
    short_name: str
    body_part: str
    laterality: Laterality
    modality: Modality
    opposite_id: Optional[str] = None


class SiteGroupOut(BaseModel):
    name: str
    site_ids: List[str]


class CatalogResponse(BaseModel):
    modality: Modality
    default_site_id: str
    sites: List[SiteOut]
    groups: List[SiteGroupOut]


class HistoryRequest(BaseModel):
    modality: Modality
    history: List[InjectionEvent] = Field(default_factory=list)
    now: Optional[datetime] = Field(None, description="Reference time. Defaults to the current UTC time.")

    @field_validator("now")
    def _ensure_aware_now(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class IntervalRequest(HistoryRequest):
    site_id: str


class RecommendationResponse(BaseModel):
    modality: Modality
    site: SiteOut
    last_site: Optional[SiteOut] = None


class CategoryResponse(BaseModel):
    category: CompoundCategory
    modality: Optional[Modality] = None
    default_site_id: Optional[str] = None
