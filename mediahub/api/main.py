"""FastAPI application for daily aggregate reporting and admin triggers."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field

from mediahub.db.session import build_aggregation_service, create_engine_from_env
from mediahub.logic.aggregation import DEFAULT_BACKFILL_DAYS, PerformanceAggregationService
from mediahub.logic.metrics import calculate_pacing_status
from mediahub.logic.models import CHANNELS
from mediahub.logic.summaries import daily_series, order_summary, publication_summary
from mediahub.utils.dates import PERIODS, get_date_range, normalize_to_day, parse_iso_date

logger = logging.getLogger(__name__)

GOAL_TYPES = ("impressions", "clicks", "units")

app = FastAPI(title="Chicago Media Hub Reporting API")


class ComputeAggregatesRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date_from: str = Field(alias="dateFrom")
    date_to: str = Field(alias="dateTo")
    campaign_id: str | None = Field(default=None, alias="campaignId")
    publication_id: int | None = Field(default=None, alias="publicationId")


class AggregatesResponse(BaseModel):
    aggregates: list[dict[str, Any]]
    total: int


class CleanupResponse(BaseModel):
    deleted: int


class PacingResponse(BaseModel):
    campaign_id: str
    goal_type: str
    goal: float
    delivered: int
    days_total: int
    days_passed: int
    days_remaining: int
    status: str
    percent_complete: int
    expected_percent: int


def get_service() -> PerformanceAggregationService:
    return build_aggregation_service(create_engine_from_env())


def _parse_day(value: str | None, name: str) -> datetime | None:
    if value is None:
        return None
    try:
        return parse_iso_date(value)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid {name}: {value}") from exc


@app.post("/reporting/compute-aggregates")
def compute_aggregates(
    payload: ComputeAggregatesRequest,
    service: PerformanceAggregationService = Depends(get_service),
) -> dict[str, Any]:
    date_from = _parse_day(payload.date_from, "dateFrom")
    date_to = _parse_day(payload.date_to, "dateTo")
    if date_from > date_to:
        raise HTTPException(status_code=400, detail="dateFrom must not be after dateTo")
    result = service.run_aggregation(
        date_from,
        date_to,
        campaign_id=payload.campaign_id,
        publication_id=payload.publication_id,
    )
    return result.to_dict()


@app.get("/reporting/daily-aggregates", response_model=AggregatesResponse)
def daily_aggregates(
    campaign_id: str | None = Query(default=None, alias="campaignId"),
    publication_id: int | None = Query(default=None, alias="publicationId"),
    channel: str | None = None,
    date_from: str | None = Query(default=None, alias="dateFrom"),
    date_to: str | None = Query(default=None, alias="dateTo"),
    period: str | None = None,
    limit: int = Query(default=100, ge=1, le=1000),
    service: PerformanceAggregationService = Depends(get_service),
) -> AggregatesResponse:
    if channel is not None and channel not in CHANNELS:
        raise HTTPException(status_code=400, detail="Unknown channel")
    day_from = _parse_day(date_from, "dateFrom")
    day_to = _parse_day(date_to, "dateTo")
    if period is not None:
        if period not in PERIODS:
            raise HTTPException(status_code=400, detail="Unknown period")
        try:
            day_from, day_to = get_date_range(period, day_from, day_to, now=service.clock())
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
    rows = service.aggregates.find(
        campaign_id=campaign_id,
        publication_id=publication_id,
        channel=channel,
        date_from=day_from,
        date_to=day_to,
        limit=limit,
    )
    return AggregatesResponse(aggregates=[row.to_dict() for row in rows], total=len(rows))


@app.post("/reporting/recompute/campaign/{campaign_id}")
def recompute_campaign(
    campaign_id: str, service: PerformanceAggregationService = Depends(get_service)
) -> dict[str, Any]:
    return service.recompute_for_campaign(campaign_id).to_dict()


@app.post("/reporting/recompute/order/{order_id}")
def recompute_order(order_id: str, service: PerformanceAggregationService = Depends(get_service)) -> dict[str, Any]:
    return service.recompute_for_order(order_id).to_dict()


@app.post("/reporting/backfill")
def backfill(
    days: int = Query(default=DEFAULT_BACKFILL_DAYS, ge=1, le=366),
    service: PerformanceAggregationService = Depends(get_service),
) -> dict[str, Any]:
    logger.info("Backfill requested for %s days", days)
    return service.backfill(days).to_dict()


@app.post("/reporting/cleanup", response_model=CleanupResponse)
def cleanup(service: PerformanceAggregationService = Depends(get_service)) -> CleanupResponse:
    return CleanupResponse(deleted=service.cleanup_stale_aggregates())


@app.get("/reporting/campaign/{campaign_id}/pacing", response_model=PacingResponse)
def campaign_pacing(
    campaign_id: str,
    start: date,
    end: date,
    goal: float = Query(..., ge=0),
    goal_type: str = Query(default="impressions", alias="goalType"),
    service: PerformanceAggregationService = Depends(get_service),
) -> PacingResponse:
    if goal_type not in GOAL_TYPES:
        raise HTTPException(status_code=400, detail="Unknown goal type")
    if start > end:
        raise HTTPException(status_code=400, detail="start must not be after end")
    totals = service.aggregates.totals(campaign_id, start, end)
    delivered = totals[goal_type]
    days_total = (end - start).days + 1
    today = normalize_to_day(service.clock()).date()
    days_passed = min(max((today - start).days, 0), days_total)
    pacing = calculate_pacing_status(delivered, goal, days_passed, days_total)
    return PacingResponse(
        campaign_id=campaign_id,
        goal_type=goal_type,
        goal=goal,
        delivered=delivered,
        days_total=days_total,
        days_passed=days_passed,
        days_remaining=days_total - days_passed,
        status=pacing.status,
        percent_complete=pacing.percent_complete,
        expected_percent=pacing.expected_percent,
    )


@app.get("/reporting/campaign/{campaign_id}/daily")
def campaign_daily(
    campaign_id: str,
    date_from: str | None = Query(default=None, alias="dateFrom"),
    date_to: str | None = Query(default=None, alias="dateTo"),
    service: PerformanceAggregationService = Depends(get_service),
) -> dict[str, Any]:
    rows = service.aggregates.find(
        campaign_id=campaign_id,
        date_from=_parse_day(date_from, "dateFrom"),
        date_to=_parse_day(date_to, "dateTo"),
        limit=None,
    )
    return {"campaignId": campaign_id, "daily": daily_series(rows)}


@app.get("/reporting/order/{order_id}/summary")
def order_performance_summary(
    order_id: str, service: PerformanceAggregationService = Depends(get_service)
) -> dict[str, Any]:
    entries = service.entries.for_order(order_id)
    if not entries:
        raise HTTPException(status_code=404, detail="Order not found")
    return order_summary(order_id, entries)


@app.get("/reporting/publication/{publication_id}/summary")
def publication_performance_summary(
    publication_id: int,
    date_from: str | None = Query(default=None, alias="dateFrom"),
    date_to: str | None = Query(default=None, alias="dateTo"),
    service: PerformanceAggregationService = Depends(get_service),
) -> dict[str, Any]:
    rows = service.aggregates.find(
        publication_id=publication_id,
        date_from=_parse_day(date_from, "dateFrom"),
        date_to=_parse_day(date_to, "dateTo"),
        limit=None,
    )
    summary = publication_summary(publication_id, rows)
    summary["dateRange"] = {"from": date_from, "to": date_to}
    return summary
