import logging
from datetime import datetime
from typing import List, Optional

from atlas_tracker.core.settings import RotationConfig
from atlas_tracker.models.enums import Modality
from atlas_tracker.models.injection import InjectionEvent, IntervalDecision
from atlas_tracker.services.injection_sites import Site, sites_for
from atlas_tracker.utils.timezone import whole_hours_between

logger = logging.getLogger(__name__)


def minimum_recovery_hours(modality: Modality, cfg: Optional[RotationConfig] = None) -> int:
    cfg = cfg or RotationConfig()
    if Modality(modality) == Modality.INTRAMUSCULAR:
        return cfg.im_min_recovery_hours
    return cfg.subq_min_recovery_hours


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}" if n == 1 else f"{n} {unit}s"


def format_wait(hours: int) -> str:
    """'5 hours', '1 day', '2 days, 1 hour'."""
    if hours < 24:
        return _plural(hours, "hour")
    days, leftover = divmod(hours, 24)
    text = _plural(days, "day")
    if leftover:
        text += f", {_plural(leftover, 'hour')}"
    return text


def check_interval(
    site_id: str,
    modality: Modality,
    history: List[InjectionEvent],
    now: datetime,
    cfg: Optional[RotationConfig] = None,
) -> IntervalDecision:
    """
    Whether `site_id` has had its minimum recovery time.
    History is most-recent-first, so the first match is the latest use.
    """
    last = next((e for e in history if e.site_id == site_id), None)
    if last is None:
        return IntervalDecision(allowed=True, site_id=site_id)

    minimum = minimum_recovery_hours(modality, cfg)
    elapsed = whole_hours_between(last.timestamp, now)

    if elapsed >= minimum:
        return IntervalDecision(
            allowed=True,
            site_id=site_id,
            hours_since_last=elapsed,
            last_used=last.timestamp,
        )

    remaining = minimum - elapsed
    logger.debug("Site %s blocked for %s more hours", site_id, remaining)
    return IntervalDecision(
        allowed=False,
        site_id=site_id,
        hours_remaining=remaining,
        hours_since_last=elapsed,
        last_used=last.timestamp,
        wait_text=format_wait(remaining),
    )


def available_sites(
    modality: Modality,
    history: List[InjectionEvent],
    now: datetime,
    cfg: Optional[RotationConfig] = None,
) -> List[Site]:
    return [
        site for site in sites_for(modality)
        if check_interval(site.id, modality, history, now, cfg).allowed
    ]


def blocked_sites(
    modality: Modality,
    history: List[InjectionEvent],
    now: datetime,
    cfg: Optional[RotationConfig] = None,
) -> List[IntervalDecision]:
    """Sites still recovering, soonest available first."""
    decisions = [check_interval(site.id, modality, history, now, cfg) for site in sites_for(modality)]
    blocked = [d for d in decisions if not d.allowed]
    return sorted(blocked, key=lambda d: d.hours_remaining)
