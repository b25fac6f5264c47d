from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from atlas_tracker.core.constants import VALIDATION_WINDOW
from atlas_tracker.core.settings import RotationConfig
from atlas_tracker.models.enums import Modality
from atlas_tracker.models.injection import InjectionEvent, RotationCheck, SiteUsage
from atlas_tracker.services.injection_sites import (
    Site,
    body_parts,
    default_site,
    get_site,
    sites_for,
)
from atlas_tracker.utils.timezone import calendar_days_between, get_zone

logger = logging.getLogger(__name__)

# Preferred anchor for subcutaneous rotation
SUBQ_ANCHOR_BODY_PART = "Belly"

_NEVER_USED = datetime.min.replace(tzinfo=timezone.utc)


def trim_history(events: Iterable[InjectionEvent], lookback: int) -> List[InjectionEvent]:
    """Most-recent-first, capped at `lookback` events."""
    ordered = sorted(events, key=lambda e: e.timestamp, reverse=True)
    return ordered[: max(0, lookback)]


def known_events(modality: Modality, history: Iterable[InjectionEvent]) -> List[Tuple[InjectionEvent, Site]]:
    """Pairs each event with its catalog site, dropping ids the catalog does not know."""
    resolved = []
    for event in history:
        site = get_site(modality, event.site_id)
        if site is None:
            logger.debug("Ignoring event at unknown site %r for %s", event.site_id, modality)
            continue
        resolved.append((event, site))
    return resolved


def _pick_body_part(modality: Modality, used: List[Tuple[InjectionEvent, Site]]) -> Optional[str]:
    parts = body_parts(modality)
    if len(parts) < 2:
        return None

    counts = {part: 0 for part in parts}
    for _, site in used:
        counts[site.body_part] += 1

    min_count = min(counts.values())
    least_used = [part for part in parts if counts[part] == min_count]

    if modality == Modality.SUBCUTANEOUS and SUBQ_ANCHOR_BODY_PART in least_used:
        return SUBQ_ANCHOR_BODY_PART
    return least_used[0]


def time_weighted_scores(
    modality: Modality,
    history: List[InjectionEvent],
    now: datetime,
    cfg: Optional[RotationConfig] = None,
) -> Dict[str, float]:
    """
    Recency/frequency decayed usage per site (lower = better candidate).
    Each use adds 1 / (days_ago * decay + 1) with whole calendar days,
    so today counts 1.0, yesterday 0.5, two days ago 0.333...
    """
    cfg = cfg or RotationConfig()
    tz = get_zone(cfg.timezone)
    scores = {site.id: 0.0 for site in sites_for(modality)}
    for event, site in known_events(modality, history):
        days = calendar_days_between(now, event.timestamp, tz)
        scores[site.id] += 1.0 / (days * cfg.time_decay_factor + 1.0)
    return scores


def _last_used_map(used: List[Tuple[InjectionEvent, Site]]) -> Dict[str, datetime]:
    last_used: Dict[str, datetime] = {}
    for event, site in used:
        current = last_used.get(site.id)
        if current is None or event.timestamp > current:
            last_used[site.id] = event.timestamp
    return last_used


def recommend_next(
    modality: Modality,
    history: List[InjectionEvent],
    now: datetime,
    cfg: Optional[RotationConfig] = None,
) -> str:
    """
    Next site to inject, as a catalog id.

    Pipeline: least-used body part (belly wins ties for subcutaneous),
    drop the side used last, then pick the lowest time-weighted score,
    ties going to the site used longest ago. Never fails: every empty
    candidate set falls back to something weaker, ending at the default site.
    """
    modality = Modality(modality)
    catalog = sites_for(modality)
    used = known_events(modality, history)

    if not used:
        return default_site(modality).id

    # 1. Body-part balancing
    chosen_part = _pick_body_part(modality, used)
    if chosen_part is None:
        part_sites = list(catalog)
    else:
        part_sites = [s for s in catalog if s.body_part == chosen_part]

    # 2. Laterality exclusion
    last_site = used[0][1]
    candidates = [s for s in part_sites if s.laterality != last_site.laterality]
    if not candidates:
        logger.debug("No opposite-side site in %s, only excluding %s", chosen_part, last_site.id)
        candidates = [s for s in part_sites if s.id != last_site.id]
    if not candidates:
        candidates = [s for s in catalog if s.id != last_site.id]
    if not candidates:
        logger.debug("Degenerate catalog for %s, using default site", modality)
        return default_site(modality).id

    # 3. Time-weighted scoring
    scores = time_weighted_scores(modality, history, now, cfg)
    last_used = _last_used_map(used)

    # 4. Selection (sorted() is stable, so catalog order settles full ties)
    ranked = sorted(
        candidates,
        key=lambda s: (scores.get(s.id, 0.0), last_used.get(s.id, _NEVER_USED)),
    )
    return ranked[0].id


def last_used_site(modality: Modality, history: List[InjectionEvent]) -> Optional[Site]:
    used = known_events(modality, history)
    if not used:
        return None
    return used[0][1]


def site_usage_stats(modality: Modality, history: List[InjectionEvent]) -> List[SiteUsage]:
    """Per-site usage over the given history, least used first."""
    used = known_events(modality, history)
    counts = Counter(site.id for _, site in used)
    last_used = _last_used_map(used)

    stats = [
        SiteUsage(
            site_id=site.id,
            display_name=site.display_name,
            count=counts.get(site.id, 0),
            last_used=last_used.get(site.id),
        )
        for site in sites_for(modality)
    ]
    return sorted(stats, key=lambda s: s.count)


def validate_rotation(modality: Modality, history: List[InjectionEvent]) -> RotationCheck:
    """Quick verdict on the last few injections, for inline hints."""
    recent = [site for _, site in known_events(modality, history)[:VALIDATION_WINDOW]]

    if len(recent) < 2:
        return RotationCheck(is_good=True, message="Not enough history to evaluate rotation")

    if len({s.id for s in recent}) == 1 and len(recent) > 2:
        return RotationCheck(
            is_good=False,
            message="Warning: Same site used multiple times. Consider rotating to prevent scar tissue.",
        )

    same_side = sum(
        1 for current, previous in zip(recent[1:], recent[:-1])
        if current.laterality == previous.laterality
    )
    if same_side >= 2:
        return RotationCheck(
            is_good=False,
            message="Tip: Try alternating between left and right sides for better rotation.",
        )

    return RotationCheck(is_good=True, message="Good rotation pattern!")
