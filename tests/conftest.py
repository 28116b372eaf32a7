from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from mediahub.db.migrate import run_migrations
from mediahub.db.repositories import DailyAggregateRepository, PerformanceEntryRepository
from mediahub.logic.aggregation import PerformanceAggregationService
from mediahub.logic.models import PerformanceEntry, PerformanceMetrics

NOW = datetime(2026, 10, 18, 9, 30)


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    run_migrations(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def entries(engine):
    return PerformanceEntryRepository(engine)


@pytest.fixture()
def aggregates(engine):
    return DailyAggregateRepository(engine)


@pytest.fixture()
def service(entries, aggregates):
    return PerformanceAggregationService(entries, aggregates, clock=lambda: NOW)


@pytest.fixture()
def add_entry(entries):
    def _add(
        date_start,
        *,
        campaign_id="C1",
        publication_id=42,
        publication_name="Chicago Reader",
        channel="print",
        order_id="O1",
        item_name=None,
        deleted_at=None,
        **metrics,
    ):
        entry = PerformanceEntry(
            campaign_id=campaign_id,
            publication_id=publication_id,
            publication_name=publication_name,
            channel=channel,
            date_start=date_start,
            order_id=order_id,
            metrics=PerformanceMetrics(**metrics),
            item_name=item_name,
            deleted_at=deleted_at,
        )
        entries.add(entry)
        return entry

    return _add
