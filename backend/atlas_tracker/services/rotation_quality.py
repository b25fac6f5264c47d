from __future__ import annotations

import logging
import math
from statistics import mean, pstdev
from typing import Dict, List, Optional

from atlas_tracker.core.constants import (
    DIVERSITY_SCALE,
    FACTOR_FEEDBACK,
    QUALITY_MIN_EVENTS,
    QUALITY_WEIGHTS,
    RATING_THRESHOLDS,
    RECOVERY_TARGET_DAYS,
)
from atlas_tracker.core.settings import RotationConfig
from atlas_tracker.models.enums import Modality, RotationRating
from atlas_tracker.models.injection import InjectionEvent, QualityFactor, QualityResult
from atlas_tracker.services.injection_sites import Site, body_parts, sites_for
from atlas_tracker.services.rotation_service import known_events
from atlas_tracker.utils.timezone import calendar_days_between, get_zone

logger = logging.getLogger(__name__)

SITE_DIVERSITY = "Site Diversity"
SIDE_ALTERNATION = "Side Alternation"
BODY_PART_DISTRIBUTION = "Body-Part Distribution"
RECOVERY_TIME = "Recovery Time"


def _clamp(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    return max(lo, min(hi, value))


def _feedback(name: str, score: float) -> str:
    if score >= 80:
        band = "positive"
    elif score >= 50:
        band = "neutral"
    else:
        band = "corrective"
    return FACTOR_FEEDBACK[name][band]


def _factor(name: str, score: float) -> QualityFactor:
    score = _clamp(score)
    return QualityFactor(
        name=name,
        score=score,
        weight=QUALITY_WEIGHTS[name],
        feedback=_feedback(name, score),
    )


def site_diversity_score(modality: Modality, sites: List[Site]) -> float:
    total = len(sites_for(modality))
    if total == 0:
        return 0.0
    unique = len({s.id for s in sites})
    # unique * 150 / total keeps the 2/3 boundary exact (2 of 3 -> 100.0)
    return min(100.0, unique * DIVERSITY_SCALE * 100.0 / total)


def side_alternation_score(sites: List[Site]) -> float:
    pairs = list(zip(sites, sites[1:]))
    if len(pairs) < 2:
        return 100.0
    alternated = sum(1 for a, b in pairs if a.laterality != b.laterality)
    return alternated / len(pairs) * 100.0


def body_part_distribution_score(modality: Modality, sites: List[Site]) -> float:
    counts: Dict[str, int] = {part: 0 for part in body_parts(modality)}
    for site in sites:
        counts[site.body_part] += 1

    values = list(counts.values())
    avg = mean(values)
    if avg == 0:
        return 100.0
    cv = pstdev(values) / avg
    return max(0.0, 100.0 - cv * 100.0)


def recovery_time_score(
    events: List[InjectionEvent],
    cfg: Optional[RotationConfig] = None,
) -> float:
    """Average day-gap between reuses of the same site, 7 days or more = 100."""
    cfg = cfg or RotationConfig()
    tz = get_zone(cfg.timezone)

    previous_use: Dict[str, InjectionEvent] = {}
    gaps: List[int] = []
    for event in sorted(events, key=lambda e: e.timestamp):
        prior = previous_use.get(event.site_id)
        if prior is not None:
            gaps.append(calendar_days_between(event.timestamp, prior.timestamp, tz))
        previous_use[event.site_id] = event

    if not gaps:
        return 100.0
    return min(100.0, mean(gaps) / RECOVERY_TARGET_DAYS * 100.0)


def round_half_up(value: float) -> int:
    """62.5 -> 63, not the banker's 62 that round() gives."""
    # 6 decimals absorbs float noise from the weights (0.3 * 75 etc.)
    return int(math.floor(round(value, 6) + 0.5))


def rating_for(score: int) -> RotationRating:
    for threshold, rating in RATING_THRESHOLDS:
        if score >= threshold:
            return RotationRating(rating)
    return RotationRating.POOR


def score(
    modality: Modality,
    history: List[InjectionEvent],
    cfg: Optional[RotationConfig] = None,
) -> QualityResult:
    """
    Rotation quality 0-100 from four weighted factors over recent history
    (most-recent-first). Fewer than three usable events gives Insufficient.
    """
    modality = Modality(modality)
    used = known_events(modality, history)
    if len(used) < QUALITY_MIN_EVENTS:
        return QualityResult(score=0, rating=RotationRating.INSUFFICIENT, factors=[])

    events = [event for event, _ in used]
    sites = [site for _, site in used]

    factors = [
        _factor(SITE_DIVERSITY, site_diversity_score(modality, sites)),
        _factor(SIDE_ALTERNATION, side_alternation_score(sites)),
        _factor(BODY_PART_DISTRIBUTION, body_part_distribution_score(modality, sites)),
        _factor(RECOVERY_TIME, recovery_time_score(events, cfg)),
    ]

    total = round_half_up(sum(f.score * f.weight for f in factors))
    total = int(_clamp(total))
    rating = rating_for(total)
    logger.debug("Rotation quality for %s: %s (%s)", modality.value, total, rating.value)
    return QualityResult(score=total, rating=rating, factors=factors)
