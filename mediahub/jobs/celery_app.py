"""Celery configuration for scheduled jobs."""

from __future__ import annotations

import os

from celery import Celery
from celery.schedules import crontab

from mediahub.utils.dates import timezone_name

broker_url = os.environ.get("REDIS_URL", "redis://redis:6379/0")
backend_url = os.environ.get("REDIS_URL", "redis://redis:6379/0")

celery_app = Celery("mediahub", broker=broker_url, backend=backend_url, include=["mediahub.jobs.daily"])
celery_app.conf.timezone = timezone_name()
celery_app.conf.beat_schedule = {
    "daily-aggregation": {
        "task": "mediahub.jobs.daily.run_daily",
        "schedule": crontab(hour=int(os.environ.get("AGGREGATION_HOUR", "2")), minute=int(os.environ.get("AGGREGATION_MINUTE", "15"))),
    },
    "weekly-aggregate-cleanup": {
        "task": "mediahub.jobs.daily.run_cleanup",
        "schedule": crontab(day_of_week="sun", hour=3, minute=0),
    },
}


@celery_app.task(name="mediahub.jobs.daily.run_daily")
def run_daily_task():  # pragma: no cover - executed by worker
    from mediahub.jobs.daily import run_daily

    return run_daily().to_dict()


@celery_app.task(name="mediahub.jobs.daily.run_backfill")
def run_backfill_task(days: int | None = None):  # pragma: no cover - executed by worker
    from mediahub.jobs.daily import run_backfill

    return run_backfill(days).to_dict()


@celery_app.task(name="mediahub.jobs.daily.run_cleanup")
def run_cleanup_task():  # pragma: no cover - executed by worker
    from mediahub.jobs.daily import run_cleanup

    return {"deleted": run_cleanup()}
