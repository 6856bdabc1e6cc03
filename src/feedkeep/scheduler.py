"""Scheduler configuration using APScheduler.

Runs the refresh cycle on a fixed interval.
"""

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from feedkeep.services.orchestrator import UpdateOrchestrator

logger = structlog.get_logger()

REFRESH_JOB_ID = "feed_refresh"


def create_scheduler(
    orchestrator: UpdateOrchestrator,
    interval_minutes: int = 60,
) -> AsyncIOScheduler:
    """Create and configure the refresh scheduler.

    Args:
        orchestrator: Orchestrator whose ``refresh`` runs on each tick.
        interval_minutes: Minutes between refresh cycles.

    Returns:
        Configured, not yet started AsyncIOScheduler.
    """
    scheduler = AsyncIOScheduler()

    # The orchestrator drops overlapping cycles itself; max_instances keeps
    # APScheduler from logging skipped runs as errors.
    scheduler.add_job(
        orchestrator.refresh,
        trigger=IntervalTrigger(minutes=interval_minutes),
        id=REFRESH_JOB_ID,
        name="Refresh feeds",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=300,
    )

    logger.info(
        "Scheduler configured",
        job_id=REFRESH_JOB_ID,
        interval_minutes=interval_minutes,
    )

    return scheduler


async def run_once(orchestrator: UpdateOrchestrator, force: bool = False) -> dict | None:
    """Run one refresh cycle immediately.

    Args:
        orchestrator: Orchestrator to drive.
        force: Invalidate cached feed documents first.

    Returns:
        Cycle statistics, or None if a cycle was already running.
    """
    if force:
        orchestrator.reset()
    logger.info("Running refresh manually", force=force)
    return await orchestrator.refresh()
