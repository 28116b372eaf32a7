"""Reporting summaries over daily aggregates and raw entries."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable

from mediahub.logic.metrics import compute_ctr, units_delivered
from mediahub.logic.models import DailyAggregate, PerformanceEntry
from mediahub.utils.dates import format_date


@dataclass(slots=True)
class DeliveryTotals:
    entries: int = 0
    impressions: int = 0
    clicks: int = 0
    reach: int = 0
    units: int = 0
    earliest: datetime | None = None
    latest: datetime | None = None

    def add(self, day: datetime, *, impressions: int, clicks: int, reach: int, units: int, entries: int) -> None:
        self.entries += entries
        self.impressions += impressions
        self.clicks += clicks
        self.reach += reach
        self.units += units
        self.earliest = day if self.earliest is None else min(self.earliest, day)
        self.latest = day if self.latest is None else max(self.latest, day)

    def to_dict(self) -> dict[str, Any]:
        return {
            "entries": self.entries,
            "impressions": self.impressions,
            "clicks": self.clicks,
            "ctr": compute_ctr(self.clicks, self.impressions),
            "reach": self.reach,
            "units": self.units,
        }


def _add_aggregate(totals: DeliveryTotals, row: DailyAggregate) -> None:
    totals.add(
        row.date,
        impressions=row.impressions,
        clicks=row.clicks,
        reach=row.reach,
        units=row.units_delivered,
        entries=row.entry_count,
    )


def _add_entry(totals: DeliveryTotals, entry: PerformanceEntry) -> None:
    metrics = entry.metrics
    totals.add(
        entry.date_start,
        impressions=metrics.impressions or 0,
        clicks=metrics.clicks or 0,
        reach=metrics.reach or 0,
        units=units_delivered(metrics),
        entries=1,
    )


def daily_series(rows: Iterable[DailyAggregate]) -> list[dict[str, Any]]:
    """One point per day, summed across publications and channels, oldest first."""
    days: dict[datetime, DeliveryTotals] = {}
    for row in rows:
        _add_aggregate(days.setdefault(row.date, DeliveryTotals()), row)
    return [{"date": format_date(day), **totals.to_dict()} for day, totals in sorted(days.items())]


def publication_summary(publication_id: int, rows: Iterable[DailyAggregate]) -> dict[str, Any]:
    overall = DeliveryTotals()
    by_campaign: dict[str, DeliveryTotals] = {}
    by_channel: dict[str, DeliveryTotals] = {}
    for row in rows:
        _add_aggregate(overall, row)
        _add_aggregate(by_campaign.setdefault(row.campaign_id, DeliveryTotals()), row)
        _add_aggregate(by_channel.setdefault(row.channel, DeliveryTotals()), row)

    campaigns = sorted(by_campaign.items(), key=lambda item: item[1].latest, reverse=True)
    return {
        "publicationId": publication_id,
        "totals": {"campaigns": len(by_campaign), **overall.to_dict()},
        "byCampaign": [
            {
                "campaignId": campaign_id,
                **totals.to_dict(),
                "earliestDate": format_date(totals.earliest),
                "latestDate": format_date(totals.latest),
            }
            for campaign_id, totals in campaigns
        ],
        "byChannel": [{"channel": channel, **totals.to_dict()} for channel, totals in sorted(by_channel.items())],
    }


def order_summary(order_id: str, entries: list[PerformanceEntry]) -> dict[str, Any]:
    """Totals and per-placement breakdown for one order's live entries.

    Placements are keyed by (item_name, channel) and listed by channel, then
    item name. ``entries`` must be non-empty.
    """
    first = entries[0]
    overall = DeliveryTotals()
    by_placement: dict[tuple[str | None, str], DeliveryTotals] = {}
    for entry in entries:
        _add_entry(overall, entry)
        _add_entry(by_placement.setdefault((entry.item_name, entry.channel), DeliveryTotals()), entry)

    placements = sorted(by_placement.items(), key=lambda item: (item[0][1], item[0][0] or ""))
    return {
        "orderId": order_id,
        "campaignId": first.campaign_id,
        "publicationId": first.publication_id,
        "publicationName": first.publication_name,
        "performanceRange": {
            "earliest": overall.earliest.isoformat(),
            "latest": overall.latest.isoformat(),
        },
        "totals": overall.to_dict(),
        "byPlacement": [
            {"itemName": item_name, "channel": channel, **totals.to_dict()}
            for (item_name, channel), totals in placements
        ],
    }
