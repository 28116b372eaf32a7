"""Business logic for delivery and pacing metrics."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields

from mediahub.logic.models import PerformanceMetrics

PACING_AHEAD_RATIO = float(os.environ.get("PACING_AHEAD_RATIO", 1.1))
PACING_ON_TRACK_RATIO = float(os.environ.get("PACING_ON_TRACK_RATIO", 0.9))
PACING_BEHIND_RATIO = float(os.environ.get("PACING_BEHIND_RATIO", 0.7))

UNIT_FIELDS = ("insertions", "spots_aired", "downloads", "posts")


@dataclass(slots=True)
class PacingResult:
    status: str
    percent_complete: int
    expected_percent: int


def compute_ctr(clicks: int, impressions: int) -> float:
    if impressions <= 0:
        return 0.0
    return clicks / impressions


def units_delivered(metrics: PerformanceMetrics) -> int:
    return sum(getattr(metrics, name) or 0 for name in UNIT_FIELDS)


def negative_metrics(metrics: PerformanceMetrics) -> list[str]:
    return [f.name for f in fields(metrics) if (getattr(metrics, f.name) or 0) < 0]


def calculate_pacing_status(delivered: float, goal: float, days_passed: int, total_days: int) -> PacingResult:
    if goal == 0 or total_days == 0:
        return PacingResult(status="on_track", percent_complete=0, expected_percent=0)
    percent_complete = round(delivered / goal * 100)
    expected_percent = round(days_passed / total_days * 100)
    ratio = percent_complete / expected_percent if expected_percent > 0 else 1.0
    if ratio >= PACING_AHEAD_RATIO:
        status = "ahead"
    elif ratio >= PACING_ON_TRACK_RATIO:
        status = "on_track"
    elif ratio >= PACING_BEHIND_RATIO:
        status = "behind"
    else:
        status = "at_risk"
    return PacingResult(status=status, percent_complete=percent_complete, expected_percent=expected_percent)
