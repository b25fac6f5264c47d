import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
str_path = str(ROOT)
if str_path not in sys.path:
    sys.path.insert(0, str_path)


NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def make_event():
    from atlas_tracker.models.injection import InjectionEvent

    def _make(site_id: str, days: float = 0, hours: float = 0, ref: datetime = NOW) -> InjectionEvent:
        return InjectionEvent(site_id=site_id, timestamp=ref - timedelta(days=days, hours=hours))

    return _make
