"""Datetime helpers."""

from __future__ import annotations

import os
from datetime import date, datetime, timedelta

import pendulum

DEFAULT_TZ = "America/Chicago"

PERIODS = ("today", "yesterday", "last7days", "last30days", "thisMonth", "lastMonth", "custom")


def timezone_name() -> str:
    return os.environ.get("TIMEZONE", DEFAULT_TZ)


def utc_now() -> pendulum.DateTime:
    return pendulum.now("UTC")


def normalize_to_day(value: date | datetime) -> datetime:
    """Truncate to UTC midnight, returned as a naive datetime."""
    if isinstance(value, datetime):
        value = to_naive_utc(value)
    return datetime(value.year, value.month, value.day)


def yesterday(now: datetime | None = None) -> datetime:
    today = normalize_to_day(now or utc_now())
    return today - timedelta(days=1)


def get_date_range(
    period: str,
    custom_start: date | datetime | None = None,
    custom_end: date | datetime | None = None,
    *,
    now: datetime | None = None,
) -> tuple[datetime, datetime]:
    today = normalize_to_day(now or utc_now())
    if period == "today":
        return today, today
    if period == "yesterday":
        return today - timedelta(days=1), today - timedelta(days=1)
    if period == "last7days":
        return today - timedelta(days=6), today
    if period == "last30days":
        return today - timedelta(days=29), today
    if period == "thisMonth":
        return today.replace(day=1), today
    if period == "lastMonth":
        end = today.replace(day=1) - timedelta(days=1)
        return end.replace(day=1), end
    if period == "custom":
        if custom_start is None or custom_end is None:
            raise ValueError("Custom period requires start and end dates")
        return normalize_to_day(custom_start), normalize_to_day(custom_end)
    return today, today


def parse_iso_date(value: str) -> datetime:
    """Parse an ISO date or timestamp and truncate it to its UTC day."""
    parsed = pendulum.parse(value)
    if not isinstance(parsed, date):
        raise ValueError(f"Not a date: {value}")
    return normalize_to_day(parsed)


def format_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    utc = pendulum.instance(value).in_timezone("UTC")
    return datetime(utc.year, utc.month, utc.day, utc.hour, utc.minute, utc.second, utc.microsecond)
