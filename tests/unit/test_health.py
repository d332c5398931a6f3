"""Unit tests for scheduler health endpoints."""

import json
from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from app.services.investment.return_processor import (
    InvestmentReturnProcessor,
    RunStats,
)
from jobs import health


@pytest.fixture(autouse=True)
def reset_health_state():
    yield
    health.set_scheduler(None)
    health.set_return_processor(None)


def _scheduler(running: bool = True) -> MagicMock:
    job = MagicMock()
    job.id = "investment_returns"
    job.name = "Investment returns"
    job.next_run_time = datetime(2026, 3, 1, 0, 1, tzinfo=UTC)

    scheduler = MagicMock()
    scheduler.running = running
    scheduler.get_jobs.return_value = [job]
    return scheduler


class TestHealthEndpoint:
    """/health reports scheduler and last return pass."""

    @pytest.mark.asyncio
    async def test_unhealthy_without_scheduler(self):
        response = await health.health_handler(MagicMock())
        assert response.status == 503

    @pytest.mark.asyncio
    async def test_reports_last_run(self):
        processor = InvestmentReturnProcessor(MagicMock())
        processor.last_stats = RunStats(
            started_at=datetime(2026, 3, 1, tzinfo=UTC),
            found=3,
            processed=2,
            skipped=1,
            total_amount_distributed=Decimal("12.5"),
        )
        health.set_scheduler(_scheduler())
        health.set_return_processor(processor)

        response = await health.health_handler(MagicMock())
        body = json.loads(response.text)

        assert response.status == 200
        assert body["status"] == "healthy"
        assert body["jobs"][0]["id"] == "investment_returns"
        assert body["return_pass_running"] is False
        assert body["last_return_pass"]["processed"] == 2
        assert body["last_return_pass"]["total_amount_distributed"] == "12.5"

    @pytest.mark.asyncio
    async def test_stopped_scheduler(self):
        health.set_scheduler(_scheduler(running=False))
        response = await health.health_handler(MagicMock())
        assert response.status == 503
        assert json.loads(response.text)["status"] == "stopped"


@pytest.mark.asyncio
async def test_readiness_requires_running_scheduler():
    assert (await health.readiness_handler(MagicMock())).status == 503
    health.set_scheduler(_scheduler())
    assert (await health.readiness_handler(MagicMock())).status == 200
