"""Seed the database with demo performance entries and compute their aggregates."""

from __future__ import annotations

from datetime import timedelta

from dotenv import load_dotenv

from mediahub.db.migrate import run_migrations
from mediahub.db.repositories import PerformanceEntryRepository
from mediahub.db.session import build_aggregation_service, create_engine_from_env
from mediahub.logic.models import PerformanceEntry, PerformanceMetrics
from mediahub.utils.dates import normalize_to_day, utc_now

DEMO_PLACEMENTS = [
    {"campaign_id": "demo-spring", "order_id": "order-101", "publication_id": 1001, "publication_name": "Chicago Reader", "channel": "print", "item_name": "Full Page Color Ad"},
    {"campaign_id": "demo-spring", "order_id": "order-102", "publication_id": 1002, "publication_name": "WBEZ 91.5", "channel": "radio", "item_name": "30s Morning Spot"},
    {"campaign_id": "demo-spring", "order_id": "order-103", "publication_id": 1003, "publication_name": "Block Club Chicago", "channel": "newsletter", "item_name": "Newsletter Sponsor"},
]


def _metrics_for(channel: str, day: int) -> PerformanceMetrics:
    if channel == "print":
        return PerformanceMetrics(insertions=1, reach=42000)
    if channel == "radio":
        return PerformanceMetrics(spots_aired=3 + day % 2, reach=18000)
    return PerformanceMetrics(impressions=5000 + 250 * day, clicks=60 + 3 * day)


def main() -> None:
    load_dotenv()
    engine = create_engine_from_env()
    run_migrations(engine)
    entries = PerformanceEntryRepository(engine)
    today = normalize_to_day(utc_now())
    for offset in range(1, 15):
        day = today - timedelta(days=offset)
        for placement in DEMO_PLACEMENTS:
            entries.add(
                PerformanceEntry(
                    date_start=day,
                    metrics=_metrics_for(placement["channel"], offset),
                    source="import",
                    entered_at=today,
                    **placement,
                )
            )
    result = build_aggregation_service(engine).backfill(14)
    print(f"Seed complete: {result.aggregates_created} aggregates created")


if __name__ == "__main__":
    main()
