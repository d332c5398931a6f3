"""
Investment return scheduler.

Runs the investment return pass on a fixed interval and serves health
endpoints.

Usage:
    python -m jobs.scheduler
"""

import asyncio
import signal

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from loguru import logger

from app.config.business_constants import RETURN_PASS_JOB_ID
from app.config.database import async_engine, async_session_maker
from app.config.settings import settings
from app.services.investment.return_processor import InvestmentReturnProcessor
from app.utils.datetime_utils import utc_now
from app.utils.logging import setup_logging
from jobs.health import (
    set_return_processor,
    set_scheduler,
    start_health_server,
    stop_health_server,
)
from jobs.tasks.return_pass import execute_return_pass


async def run_return_pass_job(processor: InvestmentReturnProcessor) -> None:
    """Scheduled job body; errors are logged so the schedule survives."""
    try:
        await execute_return_pass(processor)
    except Exception as e:
        logger.exception(f"Investment return pass failed: {e}")


def create_scheduler(
    processor: InvestmentReturnProcessor,
    interval_seconds: int | None = None,
) -> AsyncIOScheduler:
    """
    Create scheduler with the return pass job.

    The first run fires immediately on start.

    Args:
        processor: Return processor
        interval_seconds: Interval between runs (defaults to settings)

    Returns:
        Configured, not yet started scheduler
    """
    scheduler = AsyncIOScheduler(timezone="UTC")
    scheduler.add_job(
        run_return_pass_job,
        trigger="interval",
        seconds=interval_seconds or settings.return_scheduler_interval_seconds,
        args=[processor],
        id=RETURN_PASS_JOB_ID,
        name="Investment returns",
        max_instances=1,
        coalesce=True,
        next_run_time=utc_now(),
    )
    return scheduler


async def main() -> None:
    setup_logging()
    logger.info(
        f"Starting investment return scheduler "
        f"(interval={settings.return_scheduler_interval_seconds}s, "
        f"lock={settings.scheduler_lock_backend})"
    )

    processor = InvestmentReturnProcessor(async_session_maker)
    scheduler = create_scheduler(processor)
    scheduler.start()
    set_scheduler(scheduler)
    set_return_processor(processor)

    health_runner = await start_health_server(port=settings.health_check_port)

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    try:
        await stop_event.wait()
    finally:
        logger.info("Shutting down investment return scheduler...")
        scheduler.shutdown(wait=False)
        set_scheduler(None)
        await stop_health_server(health_runner)
        await async_engine.dispose()
        logger.info("Scheduler stopped")


if __name__ == "__main__":
    asyncio.run(main())
