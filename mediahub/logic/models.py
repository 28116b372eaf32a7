"""Performance reporting data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

CHANNELS = (
    "print",
    "radio",
    "podcast",
    "events",
    "social",
    "website",
    "newsletter",
    "streaming",
    "digital",
)


@dataclass(slots=True)
class PerformanceMetrics:
    impressions: int | None = None
    clicks: int | None = None
    reach: int | None = None
    insertions: int | None = None
    spots_aired: int | None = None
    downloads: int | None = None
    posts: int | None = None


@dataclass(slots=True)
class PerformanceEntry:
    campaign_id: str
    publication_id: int
    publication_name: str
    channel: str
    date_start: datetime
    order_id: str
    metrics: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    date_end: datetime | None = None
    item_name: str | None = None
    source: str = "manual"
    entered_at: datetime | None = None
    deleted_at: datetime | None = None
    id: int | None = None


@dataclass(slots=True)
class DailyAggregate:
    date: datetime
    campaign_id: str
    publication_id: int
    channel: str
    publication_name: str | None
    impressions: int
    clicks: int
    units_delivered: int
    reach: int
    ctr: float
    entry_count: int
    computed_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "campaignId": self.campaign_id,
            "publicationId": self.publication_id,
            "channel": self.channel,
            "publicationName": self.publication_name,
            "impressions": self.impressions,
            "clicks": self.clicks,
            "unitsDelivered": self.units_delivered,
            "reach": self.reach,
            "ctr": self.ctr,
            "entryCount": self.entry_count,
            "computedAt": self.computed_at.isoformat(),
        }


@dataclass(slots=True)
class AggregationRunResult:
    success: bool
    aggregates_created: int
    aggregates_updated: int
    date_range: tuple[date, date]
    duration_ms: int
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        date_from, date_to = self.date_range
        return {
            "success": self.success,
            "aggregatesCreated": self.aggregates_created,
            "aggregatesUpdated": self.aggregates_updated,
            "dateRange": {"from": _timestamp(date_from), "to": _timestamp(date_to)},
            "duration": self.duration_ms,
            "errors": list(self.errors),
        }


def _timestamp(value: date) -> str:
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    return value.isoformat()
