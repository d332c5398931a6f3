"""
Unit tests for return pass single-flight behaviour.

The pass body is replaced with a controllable coroutine; no database.
"""

import asyncio
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.services.investment.return_processor import (
    InvestmentReturnProcessor,
    RunStats,
)
from app.utils.exceptions import TransactionFailure
from jobs.tasks.return_pass import execute_return_pass

NOW = datetime(2026, 3, 1, tzinfo=UTC)


@pytest.fixture
def processor():
    return InvestmentReturnProcessor(MagicMock(), clock=lambda: NOW)


class TestSingleFlight:
    """Overlapping triggers are skipped, not queued."""

    @pytest.mark.asyncio
    async def test_overlapping_trigger_returns_none(self, processor):
        release = asyncio.Event()
        started = asyncio.Event()

        async def slow_pass(now):
            started.set()
            await release.wait()
            return RunStats(started_at=now)

        processor._run_pass = slow_pass

        first = asyncio.create_task(processor.run_scheduled_return_pass())
        await started.wait()

        assert processor.is_running is True
        assert await processor.run_scheduled_return_pass() is None

        release.set()
        stats = await first
        assert isinstance(stats, RunStats)
        assert processor.is_running is False
        assert processor.last_stats is stats

    @pytest.mark.asyncio
    async def test_guard_released_after_failure(self, processor):
        processor._run_pass = AsyncMock(side_effect=TransactionFailure("down"))

        with pytest.raises(TransactionFailure):
            await processor.run_scheduled_return_pass()

        assert processor.is_running is False
        processor._run_pass = AsyncMock(return_value=RunStats(started_at=NOW))
        assert await processor.run_scheduled_return_pass() is not None

    @pytest.mark.asyncio
    async def test_uses_clock_when_now_omitted(self, processor):
        processor._run_pass = AsyncMock(return_value=RunStats(started_at=NOW))
        await processor.run_scheduled_return_pass()
        processor._run_pass.assert_awaited_once_with(NOW)


class TestSnapshotFailure:
    """Snapshot read failure is fatal for the run."""

    @pytest.mark.asyncio
    async def test_snapshot_failure_propagates(self, processor):
        processor.runner = MagicMock()
        processor.runner.run = AsyncMock(side_effect=TransactionFailure("db down"))

        with pytest.raises(TransactionFailure):
            await processor.run_scheduled_return_pass()


class TestDistributedGuard:
    """Cross-instance lock around the pass."""

    @pytest.mark.asyncio
    async def test_skipped_when_lock_held(self, processor, mock_redis_client):
        mock_redis_client.set.return_value = None
        processor.run_scheduled_return_pass = AsyncMock()

        result = await execute_return_pass(processor, redis_client=mock_redis_client)

        assert result is None
        processor.run_scheduled_return_pass.assert_not_awaited()
        mock_redis_client.aclose.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_runs_when_lock_acquired(self, processor, mock_redis_client):
        stats = RunStats(started_at=NOW)
        processor.run_scheduled_return_pass = AsyncMock(return_value=stats)

        result = await execute_return_pass(processor, redis_client=mock_redis_client)

        assert result is stats
        mock_redis_client.eval.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_local_backend_runs_directly(self, processor):
        stats = RunStats(started_at=NOW)
        processor.run_scheduled_return_pass = AsyncMock(return_value=stats)

        assert await execute_return_pass(processor) is stats
