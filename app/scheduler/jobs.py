"""APScheduler job definitions and scheduler management.

Runs the campaign counter reconciliation on an interval so the cached
counters on ``campaigns`` converge even when a write-through refresh failed.
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import uuid4

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.core.config import settings
from app.core.errors import InterviewError
from app.scheduler.lock import acquire_sync_lock, release_sync_lock
from app.services.stats import sync_all_campaign_counters

logger = logging.getLogger(__name__)

# Module-level scheduler instance (singleton)
scheduler = BackgroundScheduler()


def run_counter_sync(trigger: str = "scheduler") -> dict[str, Any]:
    """Run one reconciliation unless another one is in flight."""
    run_id = uuid4()
    if not acquire_sync_lock(run_id):
        logger.warning(
            "Counter sync already running, skipping",
            extra={"run_id": str(run_id), "trigger": trigger},
        )
        return {"status": "skipped", "reason": "sync_already_running"}

    try:
        summary = sync_all_campaign_counters()
    finally:
        release_sync_lock()

    return {"status": "success", "run_id": str(run_id), **summary}


def _sync_job() -> None:
    """Wrapper that APScheduler calls on each interval tick."""
    try:
        run_counter_sync(trigger="scheduler")
    except InterviewError:
        # Next tick retries; the scheduler thread must survive.
        logger.error("counter_sync_failed", exc_info=True)


def start_scheduler() -> None:
    """Configure and start the background scheduler when enabled."""
    if not settings.STATS_SYNC_ENABLED:
        logger.info("scheduler_disabled")
        return

    scheduler.add_job(
        _sync_job,
        IntervalTrigger(minutes=settings.STATS_SYNC_INTERVAL_MINUTES),
        id="campaign_counter_sync",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(
        "scheduler_started",
        extra={"interval_minutes": settings.STATS_SYNC_INTERVAL_MINUTES},
    )


def shutdown_scheduler() -> None:
    """Shutdown the scheduler gracefully (FastAPI lifespan cleanup)."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("scheduler_stopped")


def is_scheduler_running() -> bool:
    return scheduler.running
