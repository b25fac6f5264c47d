import pytest

from atlas_tracker.core.settings import RotationConfig
from atlas_tracker.models.enums import Modality
from atlas_tracker.services.interval_guard import (
    available_sites,
    blocked_sites,
    check_interval,
    format_wait,
    minimum_recovery_hours,
)

IM = Modality.INTRAMUSCULAR
SUBQ = Modality.SUBCUTANEOUS


def test_minimum_hours_per_modality():
    assert minimum_recovery_hours(IM) == 48
    assert minimum_recovery_hours(SUBQ) == 24
    assert minimum_recovery_hours(IM, RotationConfig(im_min_recovery_hours=72)) == 72


def test_unused_site_is_allowed(now):
    decision = check_interval("glute_left", IM, [], now)
    assert decision.allowed is True
    assert decision.hours_remaining is None
    assert decision.wait_text is None


def test_blocked_reuse_after_ten_hours(now, make_event):
    decision = check_interval("glute_left", IM, [make_event("glute_left", hours=10)], now)
    assert decision.allowed is False
    assert decision.site_id == "glute_left"
    assert decision.hours_remaining == 38
    assert decision.hours_since_last == 10
    assert decision.wait_text == "1 day, 14 hours"


def test_partial_hours_are_floored(now, make_event):
    decision = check_interval("glute_left", IM, [make_event("glute_left", hours=47.99)], now)
    assert decision.allowed is False
    assert decision.hours_remaining == 1
    assert decision.wait_text == "1 hour"


def test_subq_window(now, make_event):
    blocked = check_interval("thigh_left", SUBQ, [make_event("thigh_left", hours=1)], now)
    assert blocked.hours_remaining == 23
    assert blocked.wait_text == "23 hours"

    allowed = check_interval("thigh_left", SUBQ, [make_event("thigh_left", hours=24)], now)
    assert allowed.allowed is True
    assert allowed.hours_since_last == 24


@pytest.mark.parametrize("hours_ago", range(0, 61))
def test_allowed_iff_minimum_elapsed(now, make_event, hours_ago):
    decision = check_interval("delt_right", IM, [make_event("delt_right", hours=hours_ago)], now)
    assert decision.allowed is (hours_ago >= 48)
    if decision.allowed:
        assert decision.hours_remaining is None
    else:
        assert decision.hours_remaining == 48 - hours_ago


def test_only_most_recent_use_counts(now, make_event):
    history = [make_event("quad_left", hours=5), make_event("quad_left", hours=100)]
    decision = check_interval("quad_left", IM, history, now)
    assert decision.hours_remaining == 43


def test_other_sites_do_not_block(now, make_event):
    history = [make_event("quad_left", hours=1)]
    assert check_interval("quad_right", IM, history, now).allowed is True


def test_future_event_counts_as_just_used(now, make_event):
    decision = check_interval("glute_left", IM, [make_event("glute_left", hours=-3)], now)
    assert decision.allowed is False
    assert decision.hours_remaining == 48


def test_configured_minimum(now, make_event):
    cfg = RotationConfig(im_min_recovery_hours=72)
    decision = check_interval("glute_left", IM, [make_event("glute_left", hours=10)], now, cfg)
    assert decision.hours_remaining == 62
    assert decision.wait_text == "2 days, 14 hours"


@pytest.mark.parametrize(
    "hours, text",
    [
        (0, "0 hours"),
        (1, "1 hour"),
        (23, "23 hours"),
        (24, "1 day"),
        (25, "1 day, 1 hour"),
        (48, "2 days"),
        (50, "2 days, 2 hours"),
    ],
)
def test_format_wait(hours, text):
    assert format_wait(hours) == text


def test_available_and_blocked_split_catalog(now, make_event):
    history = [
        make_event("glute_left", hours=10),
        make_event("delt_right", hours=30),
        make_event("quad_left", hours=50),
    ]
    blocked = blocked_sites(IM, history, now)
    assert [d.site_id for d in blocked] == ["delt_right", "glute_left"]
    assert [d.hours_remaining for d in blocked] == [18, 38]

    available = [s.id for s in available_sites(IM, history, now)]
    assert available == ["glute_right", "delt_left", "quad_left", "quad_right", "vg_left", "vg_right"]
