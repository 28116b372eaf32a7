from datetime import datetime, timedelta

import pytest

from mediahub.jobs import daily
from mediahub.logic import aggregation

NOW = datetime(2026, 10, 18, 0, 0, 5)
TODAY = datetime(2026, 10, 18)
YESTERDAY = datetime(2026, 10, 17)


@pytest.fixture(autouse=True)
def job_engine(monkeypatch, engine):
    monkeypatch.setattr(daily, "create_engine_from_env", lambda: engine)
    monkeypatch.setattr(aggregation, "utc_now", lambda: NOW)
    return engine


def test_run_daily_aggregates_yesterday(aggregates, add_entry):
    add_entry(YESTERDAY + timedelta(hours=10), impressions=200, clicks=4)
    add_entry(YESTERDAY - timedelta(days=3), impressions=50)

    result = daily.run_daily()

    assert result.success
    assert result.aggregates_created == 1
    assert result.date_range == (YESTERDAY, YESTERDAY)
    (row,) = aggregates.find()
    assert row.date == YESTERDAY
    assert row.ctr == 0.02
    assert row.computed_at == NOW


def test_run_backfill_uses_env_default(monkeypatch, add_entry):
    monkeypatch.setenv("BACKFILL_DAYS", "5")
    add_entry(TODAY - timedelta(days=5), insertions=1)
    add_entry(TODAY - timedelta(days=6), insertions=1)

    result = daily.run_backfill()

    assert result.aggregates_created == 1
    assert result.date_range == (TODAY - timedelta(days=5), TODAY)


def test_run_cleanup():
    assert daily.run_cleanup() == 0
