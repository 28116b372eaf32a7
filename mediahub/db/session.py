"""Database engine helpers."""

from __future__ import annotations

import os

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from mediahub.db.repositories import DailyAggregateRepository, PerformanceEntryRepository
from mediahub.logic.aggregation import PerformanceAggregationService

DEFAULT_DATABASE_URL = "postgresql://user:pass@db:5432/mediahub"


def create_engine_from_env() -> Engine:
    """Create an engine using the DATABASE_URL environment variable."""
    url = os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL)
    return create_engine(url, pool_pre_ping=True, future=True)


def build_aggregation_service(engine: Engine) -> PerformanceAggregationService:
    return PerformanceAggregationService(
        PerformanceEntryRepository(engine),
        DailyAggregateRepository(engine),
    )
