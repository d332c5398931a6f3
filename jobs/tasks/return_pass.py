"""
Investment return pass execution.

Shared by the scheduler and the on-demand dramatiq actor. Adds the
cross-instance Redis lock on top of the processor's own guard.
"""

from typing import Any

from loguru import logger

from app.config.business_constants import RETURN_PASS_LOCK_KEY
from app.config.settings import settings
from app.services.investment.return_processor import (
    InvestmentReturnProcessor,
    RunStats,
)
from app.utils.distributed_lock import DistributedLock
from app.utils.redis_utils import get_redis_client


async def execute_return_pass(
    processor: InvestmentReturnProcessor,
    redis_client: Any | None = None,
) -> RunStats | None:
    """
    Run one return pass, guarded by the configured lock backend.

    With SCHEDULER_LOCK_BACKEND=redis (or an explicit redis_client) the
    pass only runs if no other instance holds the lock.

    Args:
        processor: Return processor
        redis_client: Redis client to lock with (optional)

    Returns:
        Run statistics, or None if the pass was skipped
    """
    if redis_client is None and settings.scheduler_lock_backend != "redis":
        return await processor.run_scheduled_return_pass()

    own_client = redis_client is None
    if own_client:
        redis_client = get_redis_client()

    lock = DistributedLock(redis_client=redis_client)
    try:
        async with lock.lock(
            RETURN_PASS_LOCK_KEY,
            timeout=settings.scheduler_lock_timeout_seconds,
            blocking=False,
        ) as acquired:
            if not acquired:
                logger.warning(
                    "Investment return pass running on another instance, "
                    "skipping"
                )
                return None
            return await processor.run_scheduled_return_pass()
    finally:
        if own_client:
            await redis_client.aclose()
