"""Aggregation job entry points."""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

from mediahub.db.session import build_aggregation_service, create_engine_from_env
from mediahub.logic.models import AggregationRunResult

logger = logging.getLogger(__name__)


def run_daily() -> AggregationRunResult:
    load_dotenv()
    service = build_aggregation_service(create_engine_from_env())
    result = service.run_daily_aggregation()
    _log_result("daily", result)
    return result


def run_backfill(days: int | None = None) -> AggregationRunResult:
    load_dotenv()
    if days is None:
        days = int(os.environ.get("BACKFILL_DAYS", "30"))
    service = build_aggregation_service(create_engine_from_env())
    result = service.backfill(days)
    _log_result("backfill", result)
    return result


def run_cleanup() -> int:
    load_dotenv()
    service = build_aggregation_service(create_engine_from_env())
    return service.cleanup_stale_aggregates()


def _log_result(kind: str, result: AggregationRunResult) -> None:
    if result.success:
        logger.info(
            "%s aggregation ok: %s created, %s updated in %sms",
            kind,
            result.aggregates_created,
            result.aggregates_updated,
            result.duration_ms,
        )
        return
    for error in result.errors:
        logger.warning("%s aggregation error: %s", kind, error)


if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
    run_daily()
