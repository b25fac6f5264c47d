from datetime import timedelta

from atlas_tracker.models.enums import Modality
from atlas_tracker.models.injection import InjectionEvent
from atlas_tracker.services.rotation_service import (
    last_used_site,
    site_usage_stats,
    trim_history,
    validate_rotation,
)

IM = Modality.INTRAMUSCULAR
SUBQ = Modality.SUBCUTANEOUS


def test_trim_history_orders_and_caps(now):
    events = [
        InjectionEvent(site_id="glute_left", timestamp=now - timedelta(days=3)),
        InjectionEvent(site_id="delt_right", timestamp=now - timedelta(days=1)),
        InjectionEvent(site_id="quad_left", timestamp=now - timedelta(days=2)),
    ]
    trimmed = trim_history(events, 2)
    assert [e.site_id for e in trimmed] == ["delt_right", "quad_left"]
    assert trim_history(events, 0) == []


def test_naive_timestamps_are_utc(now):
    event = InjectionEvent(site_id="glute_left", timestamp=now.replace(tzinfo=None))
    assert event.timestamp == now


def test_site_usage_stats(now, make_event):
    history = [
        make_event("glute_left", days=1),
        make_event("delt_right", days=2),
        make_event("glute_left", days=5),
        make_event("not_a_site", days=6),
    ]
    stats = site_usage_stats(IM, history)
    assert len(stats) == 8
    assert [s.count for s in stats] == [0, 0, 0, 0, 0, 0, 1, 2]
    assert [s.site_id for s in stats[:6]] == [
        "glute_right", "delt_left", "quad_left", "quad_right", "vg_left", "vg_right",
    ]

    by_id = {s.site_id: s for s in stats}
    assert by_id["glute_left"].last_used == now - timedelta(days=1)
    assert by_id["glute_left"].display_name == "Left Glute"
    assert by_id["vg_left"].last_used is None


def test_last_used_site(make_event):
    assert last_used_site(SUBQ, []) is None
    history = [make_event("glute_left", days=1), make_event("thigh_right", days=2)]
    assert last_used_site(SUBQ, history).id == "thigh_right"


def test_validate_rotation_not_enough_history(make_event):
    check = validate_rotation(IM, [make_event("glute_left", days=1)])
    assert check.is_good is True
    assert check.message == "Not enough history to evaluate rotation"


def test_validate_rotation_same_site(make_event):
    history = [make_event("glute_left", days=d) for d in (1, 3, 5)]
    check = validate_rotation(IM, history)
    assert check.is_good is False
    assert "scar tissue" in check.message


def test_validate_rotation_same_side(make_event):
    history = [
        make_event("glute_left", days=1),
        make_event("delt_left", days=2),
        make_event("quad_left", days=3),
        make_event("vg_right", days=4),
    ]
    check = validate_rotation(IM, history)
    assert check.is_good is False
    assert "alternating" in check.message


def test_validate_rotation_good(make_event):
    history = [
        make_event("left_belly_upper", days=1),
        make_event("right_belly_lower", days=2),
        make_event("thigh_left", days=3),
        make_event("glute_right_upper", days=4),
    ]
    check = validate_rotation(SUBQ, history)
    assert check.is_good is True
    assert check.message == "Good rotation pattern!"
