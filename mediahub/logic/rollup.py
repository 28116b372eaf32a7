"""Fold raw performance entries into daily rollups."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from mediahub.logic.metrics import compute_ctr, negative_metrics, units_delivered
from mediahub.logic.models import DailyAggregate, PerformanceEntry
from mediahub.utils.dates import normalize_to_day

logger = logging.getLogger(__name__)

GroupKey = tuple[datetime, str, int, str]


@dataclass(slots=True)
class _Totals:
    publication_name: str
    impressions: int = 0
    clicks: int = 0
    reach: int = 0
    units_delivered: int = 0
    entry_count: int = 0


def group_key(entry: PerformanceEntry) -> GroupKey:
    return (normalize_to_day(entry.date_start), entry.campaign_id, entry.publication_id, entry.channel)


def rollup_entries(entries: Iterable[PerformanceEntry], computed_at: datetime) -> list[DailyAggregate]:
    """Group entries by (day, campaign, publication, channel) and sum their metrics.

    The publication name of the first entry seen in a group is kept as-is,
    even if later entries in the same group carry a different name. Entries
    reporting a negative metric are skipped so no sum drops below zero.
    """
    groups: dict[GroupKey, _Totals] = {}
    for entry in entries:
        if entry.deleted_at is not None:
            continue
        rejected = negative_metrics(entry.metrics)
        if rejected:
            logger.warning("Skipping entry %s with negative %s", entry.id, ", ".join(rejected))
            continue
        key = group_key(entry)
        totals = groups.get(key)
        if totals is None:
            totals = groups[key] = _Totals(publication_name=entry.publication_name)
        metrics = entry.metrics
        totals.impressions += metrics.impressions or 0
        totals.clicks += metrics.clicks or 0
        totals.reach += metrics.reach or 0
        totals.units_delivered += units_delivered(metrics)
        totals.entry_count += 1

    aggregates: list[DailyAggregate] = []
    for (day, campaign_id, publication_id, channel), totals in groups.items():
        aggregates.append(
            DailyAggregate(
                date=day,
                campaign_id=campaign_id,
                publication_id=publication_id,
                channel=channel,
                publication_name=totals.publication_name,
                impressions=totals.impressions,
                clicks=totals.clicks,
                units_delivered=totals.units_delivered,
                reach=totals.reach,
                ctr=compute_ctr(totals.clicks, totals.impressions),
                entry_count=totals.entry_count,
                computed_at=computed_at,
            )
        )
    aggregates.sort(key=lambda agg: (agg.date, agg.campaign_id, agg.publication_id, agg.channel))
    return aggregates
