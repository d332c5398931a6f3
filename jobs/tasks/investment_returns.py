"""
Investment returns task.

On-demand return pass ("run now") executed by a dramatiq worker.
Always takes the Redis lock, since workers run outside the scheduler
process.
"""

import dramatiq
from loguru import logger

from app.config.settings import settings
from app.services.investment.return_processor import (
    InvestmentReturnProcessor,
    RunStats,
)
from app.utils.redis_utils import get_redis_client
from jobs.async_runner import run_async
from jobs.broker import broker  # noqa: F401
from jobs.tasks.return_pass import execute_return_pass
from jobs.utils.database import task_session_maker


@dramatiq.actor(
    max_retries=0,
    time_limit=settings.scheduler_lock_timeout_seconds * 1000,
)
def run_investment_returns() -> None:
    """Run one investment return pass now."""
    logger.info("On-demand investment return pass requested")

    stats = run_async(_run_investment_returns_async())
    if stats is None:
        logger.info("On-demand investment return pass skipped")
        return

    logger.info(
        f"On-demand investment return pass complete: "
        f"{stats.processed} processed, "
        f"{stats.total_amount_distributed} distributed"
    )


async def _run_investment_returns_async() -> RunStats | None:
    processor = InvestmentReturnProcessor(task_session_maker)
    redis_client = get_redis_client()
    try:
        return await execute_return_pass(processor, redis_client=redis_client)
    finally:
        await redis_client.aclose()
