"""Daily performance aggregation.

Rolls raw performance entries up into one row per
(day, campaign, publication, channel) so reporting dashboards can read
pre-computed totals. Meant to be triggered by a scheduler or an admin
endpoint; every operation is a single pass that converges to the same rows
for unchanged source entries.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta
from typing import Callable

from mediahub.db.repositories import DailyAggregateRepository, PerformanceEntryRepository
from mediahub.logic.models import AggregationRunResult
from mediahub.logic.rollup import rollup_entries
from mediahub.utils.dates import format_date, normalize_to_day, to_naive_utc, utc_now, yesterday

logger = logging.getLogger(__name__)

DEFAULT_BACKFILL_DAYS = 30


class PerformanceAggregationService:
    def __init__(
        self,
        entries: PerformanceEntryRepository,
        aggregates: DailyAggregateRepository,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.entries = entries
        self.aggregates = aggregates
        self.clock = clock or utc_now

    def run_aggregation(
        self,
        date_from: datetime,
        date_to: datetime,
        campaign_id: str | None = None,
        publication_id: int | None = None,
    ) -> AggregationRunResult:
        started = time.monotonic()
        errors: list[str] = []
        created = 0
        updated = 0

        try:
            entries = self.entries.query(date_from, date_to, campaign_id=campaign_id, publication_id=publication_id)
            computed_at = to_naive_utc(self.clock())
            rollups = rollup_entries(entries, computed_at)
        except Exception as exc:
            logger.exception("Aggregation failed for %s..%s", format_date(date_from), format_date(date_to))
            return AggregationRunResult(
                success=False,
                aggregates_created=0,
                aggregates_updated=0,
                date_range=(date_from, date_to),
                duration_ms=_elapsed_ms(started),
                errors=[str(exc)],
            )

        logger.info("Processing %s aggregate groups from %s entries", len(rollups), len(entries))
        for aggregate in rollups:
            try:
                inserted = self.aggregates.upsert(aggregate)
            except Exception as exc:
                message = (
                    f"Error upserting aggregate for "
                    f"{aggregate.campaign_id}/{aggregate.publication_id}/{aggregate.channel}: {exc}"
                )
                logger.error(
                    "Upsert failed for %s/%s/%s: %s", aggregate.campaign_id, aggregate.publication_id, aggregate.channel, exc
                )
                errors.append(message)
                continue
            if inserted:
                created += 1
            else:
                updated += 1

        duration_ms = _elapsed_ms(started)
        logger.info("Aggregation completed in %sms: %s created, %s updated", duration_ms, created, updated)
        return AggregationRunResult(
            success=not errors,
            aggregates_created=created,
            aggregates_updated=updated,
            date_range=(date_from, date_to),
            duration_ms=duration_ms,
            errors=errors,
        )

    def run_daily_aggregation(self) -> AggregationRunResult:
        """Aggregate yesterday's entries."""
        target = yesterday(self.clock())
        logger.info("Running daily aggregation for %s", format_date(target))
        return self.run_aggregation(target, target)

    def recompute_for_campaign(self, campaign_id: str) -> AggregationRunResult:
        span = self.entries.date_span(campaign_id=campaign_id)
        if span is None:
            return self._empty_result()
        logger.info("Recomputing aggregates for campaign %s", campaign_id)
        return self.run_aggregation(span[0], span[1], campaign_id=campaign_id)

    def recompute_for_order(self, order_id: str) -> AggregationRunResult:
        entry = self.entries.first_for_order(order_id)
        if entry is None:
            return self._empty_result()
        span = self.entries.date_span(order_id=order_id)
        if span is None:
            return self._empty_result()
        logger.info("Recomputing aggregates for order %s", order_id)
        return self.run_aggregation(
            span[0],
            span[1],
            campaign_id=entry.campaign_id,
            publication_id=entry.publication_id,
        )

    def backfill(self, days: int = DEFAULT_BACKFILL_DAYS) -> AggregationRunResult:
        today = normalize_to_day(self.clock())
        start = today - timedelta(days=days)
        logger.info("Backfilling aggregates for last %s days", days)
        return self.run_aggregation(start, today)

    def cleanup_stale_aggregates(self) -> int:
        deleted = self.aggregates.delete_where_empty()
        logger.info("Cleaned up %s stale aggregates", deleted)
        return deleted

    def _empty_result(self) -> AggregationRunResult:
        now = to_naive_utc(self.clock())
        return AggregationRunResult(
            success=True,
            aggregates_created=0,
            aggregates_updated=0,
            date_range=(now, now),
            duration_ms=0,
            errors=[],
        )


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
