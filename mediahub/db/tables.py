"""Table definitions for performance entries and their daily rollups."""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Float,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

METRIC_COLUMNS = ("impressions", "clicks", "reach", "insertions", "spots_aired", "downloads", "posts")
AGGREGATE_SUM_COLUMNS = ("impressions", "clicks", "units_delivered", "reach", "entry_count")


def _non_negative(table_name: str, columns: tuple[str, ...]) -> list[CheckConstraint]:
    return [CheckConstraint(f"{name} >= 0", name=f"ck_{table_name}_{name}_non_negative") for name in columns]


performance_entries = Table(
    "performance_entries",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("order_id", Text, nullable=False, index=True),
    Column("campaign_id", Text, nullable=False, index=True),
    Column("publication_id", Integer, nullable=False),
    Column("publication_name", Text, nullable=False),
    Column("item_name", Text),
    Column("channel", String(32), nullable=False),
    Column("date_start", DateTime, nullable=False, index=True),
    Column("date_end", DateTime),
    *[Column(name, Integer) for name in METRIC_COLUMNS],
    Column("source", String(16), nullable=False, default="manual"),
    Column("entered_at", DateTime),
    Column("deleted_at", DateTime),
    *_non_negative("performance_entries", METRIC_COLUMNS),
)

daily_aggregates = Table(
    "daily_aggregates",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("date", DateTime, nullable=False),
    Column("campaign_id", Text, nullable=False),
    Column("publication_id", Integer, nullable=False),
    Column("channel", String(32), nullable=False),
    Column("publication_name", Text),
    Column("impressions", Integer, nullable=False, default=0),
    Column("clicks", Integer, nullable=False, default=0),
    Column("units_delivered", Integer, nullable=False, default=0),
    Column("reach", Integer, nullable=False, default=0),
    Column("ctr", Float, nullable=False, default=0.0),
    Column("entry_count", Integer, nullable=False, default=0),
    Column("computed_at", DateTime, nullable=False),
    UniqueConstraint("date", "campaign_id", "publication_id", "channel", name="uq_daily_aggregates_key"),
    *_non_negative("daily_aggregates", AGGREGATE_SUM_COLUMNS),
)
