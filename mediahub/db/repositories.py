"""Data access for performance entries and daily aggregates."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Mapping

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Connection, Engine

from mediahub.db.tables import METRIC_COLUMNS, daily_aggregates, performance_entries
from mediahub.logic.models import DailyAggregate, PerformanceEntry, PerformanceMetrics
from mediahub.utils.dates import normalize_to_day

AGGREGATE_KEY = ("date", "campaign_id", "publication_id", "channel")
AGGREGATE_VALUES = (
    "publication_name",
    "impressions",
    "clicks",
    "units_delivered",
    "reach",
    "ctr",
    "entry_count",
    "computed_at",
)


class PerformanceEntryRepository:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def query(
        self,
        date_from: datetime,
        date_to: datetime,
        campaign_id: str | None = None,
        publication_id: int | None = None,
    ) -> list[PerformanceEntry]:
        """Live entries whose date_start falls on any day from date_from through date_to."""
        start = normalize_to_day(date_from)
        end = normalize_to_day(date_to) + timedelta(days=1)
        stmt = select(performance_entries).where(
            performance_entries.c.date_start >= start,
            performance_entries.c.date_start < end,
            performance_entries.c.deleted_at.is_(None),
        )
        if campaign_id is not None:
            stmt = stmt.where(performance_entries.c.campaign_id == campaign_id)
        if publication_id is not None:
            stmt = stmt.where(performance_entries.c.publication_id == publication_id)
        stmt = stmt.order_by(performance_entries.c.date_start, performance_entries.c.id)
        with self.engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [_entry_from_row(row) for row in rows]

    def date_span(
        self, *, campaign_id: str | None = None, order_id: str | None = None
    ) -> tuple[datetime, datetime] | None:
        stmt = select(
            func.min(performance_entries.c.date_start),
            func.max(performance_entries.c.date_start),
        ).where(performance_entries.c.deleted_at.is_(None))
        if campaign_id is not None:
            stmt = stmt.where(performance_entries.c.campaign_id == campaign_id)
        if order_id is not None:
            stmt = stmt.where(performance_entries.c.order_id == order_id)
        with self.engine.connect() as conn:
            min_date, max_date = conn.execute(stmt).one()
        if min_date is None or max_date is None:
            return None
        return min_date, max_date

    def first_for_order(self, order_id: str) -> PerformanceEntry | None:
        stmt = (
            select(performance_entries)
            .where(
                performance_entries.c.order_id == order_id,
                performance_entries.c.deleted_at.is_(None),
            )
            .order_by(performance_entries.c.id)
            .limit(1)
        )
        with self.engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        return _entry_from_row(row) if row else None

    def for_order(self, order_id: str) -> list[PerformanceEntry]:
        stmt = (
            select(performance_entries)
            .where(
                performance_entries.c.order_id == order_id,
                performance_entries.c.deleted_at.is_(None),
            )
            .order_by(performance_entries.c.date_start, performance_entries.c.id)
        )
        with self.engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [_entry_from_row(row) for row in rows]

    def add(self, entry: PerformanceEntry) -> int:
        metrics = entry.metrics
        values = {
            "order_id": entry.order_id,
            "campaign_id": entry.campaign_id,
            "publication_id": entry.publication_id,
            "publication_name": entry.publication_name,
            "item_name": entry.item_name,
            "channel": entry.channel,
            "date_start": entry.date_start,
            "date_end": entry.date_end,
            **{name: getattr(metrics, name) for name in METRIC_COLUMNS},
            "source": entry.source,
            "entered_at": entry.entered_at,
            "deleted_at": entry.deleted_at,
        }
        with self.engine.begin() as conn:
            result = conn.execute(insert(performance_entries).values(**values))
            entry_id = int(result.inserted_primary_key[0])
        entry.id = entry_id
        return entry_id

    def soft_delete(self, entry_id: int, at: datetime) -> None:
        with self.engine.begin() as conn:
            conn.execute(
                update(performance_entries)
                .where(performance_entries.c.id == entry_id)
                .values(deleted_at=at)
            )


class DailyAggregateRepository:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def upsert(self, aggregate: DailyAggregate) -> bool:
        """Create or replace the row for the aggregate's key. Returns True when newly inserted."""
        values = {name: getattr(aggregate, name) for name in AGGREGATE_KEY + AGGREGATE_VALUES}
        with self.engine.begin() as conn:
            existing = conn.execute(
                select(daily_aggregates.c.id).where(*_key_clause(aggregate))
            ).scalar_one_or_none()
            stmt = _dialect_insert(conn).values(**values)
            stmt = stmt.on_conflict_do_update(
                index_elements=list(AGGREGATE_KEY),
                set_={name: stmt.excluded[name] for name in AGGREGATE_VALUES},
            )
            conn.execute(stmt)
        return existing is None

    def totals(self, campaign_id: str, date_from: datetime, date_to: datetime) -> dict[str, int]:
        stmt = select(
            func.coalesce(func.sum(daily_aggregates.c.impressions), 0),
            func.coalesce(func.sum(daily_aggregates.c.clicks), 0),
            func.coalesce(func.sum(daily_aggregates.c.units_delivered), 0),
            func.coalesce(func.sum(daily_aggregates.c.reach), 0),
        ).where(
            daily_aggregates.c.campaign_id == campaign_id,
            daily_aggregates.c.date >= normalize_to_day(date_from),
            daily_aggregates.c.date <= normalize_to_day(date_to),
        )
        with self.engine.connect() as conn:
            impressions, clicks, units, reach = conn.execute(stmt).one()
        return {"impressions": int(impressions), "clicks": int(clicks), "units": int(units), "reach": int(reach)}

    def delete_where_empty(self) -> int:
        with self.engine.begin() as conn:
            result = conn.execute(delete(daily_aggregates).where(daily_aggregates.c.entry_count == 0))
            deleted = result.rowcount or 0
        return deleted

    def find(
        self,
        *,
        campaign_id: str | None = None,
        publication_id: int | None = None,
        channel: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        limit: int | None = 100,
    ) -> list[DailyAggregate]:
        stmt = select(daily_aggregates)
        if campaign_id is not None:
            stmt = stmt.where(daily_aggregates.c.campaign_id == campaign_id)
        if publication_id is not None:
            stmt = stmt.where(daily_aggregates.c.publication_id == publication_id)
        if channel is not None:
            stmt = stmt.where(daily_aggregates.c.channel == channel)
        if date_from is not None:
            stmt = stmt.where(daily_aggregates.c.date >= normalize_to_day(date_from))
        if date_to is not None:
            stmt = stmt.where(daily_aggregates.c.date <= normalize_to_day(date_to))
        stmt = stmt.order_by(daily_aggregates.c.date.desc(), daily_aggregates.c.id).limit(limit)
        with self.engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [_aggregate_from_row(row) for row in rows]


def _key_clause(aggregate: DailyAggregate) -> list[Any]:
    return [daily_aggregates.c[name] == getattr(aggregate, name) for name in AGGREGATE_KEY]


def _dialect_insert(conn: Connection):
    if conn.dialect.name == "sqlite":
        return sqlite.insert(daily_aggregates)
    return postgresql.insert(daily_aggregates)


def _entry_from_row(row: Mapping[str, Any]) -> PerformanceEntry:
    return PerformanceEntry(
        id=row["id"],
        order_id=row["order_id"],
        campaign_id=row["campaign_id"],
        publication_id=row["publication_id"],
        publication_name=row["publication_name"],
        item_name=row["item_name"],
        channel=row["channel"],
        date_start=row["date_start"],
        date_end=row["date_end"],
        metrics=PerformanceMetrics(**{name: row[name] for name in METRIC_COLUMNS}),
        source=row["source"],
        entered_at=row["entered_at"],
        deleted_at=row["deleted_at"],
    )


def _aggregate_from_row(row: Mapping[str, Any]) -> DailyAggregate:
    return DailyAggregate(**{name: row[name] for name in AGGREGATE_KEY + AGGREGATE_VALUES})
