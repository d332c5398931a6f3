"""
Investment return processor.

Periodic pass over active investments that credits matured returns.

Single-flight: the processor owns an asyncio.Lock. A trigger that fires
while a pass is running is logged and dropped, never queued.
"""

import asyncio
import time
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.enums import EarningSource, EarningStatus
from app.models.investment import Investment
from app.repositories.account_repository import AccountRepository
from app.repositories.earning_repository import EarningRepository
from app.repositories.investment_product_repository import (
    InvestmentProductRepository,
)
from app.repositories.investment_repository import InvestmentRepository
from app.services.investment.maturity import (
    calculate_return_amount,
    investment_idempotency_key,
    is_return_due,
)
from app.services.ledger.balance_manager import BalanceManager
from app.services.ledger.transaction_runner import TransactionRunner
from app.utils.datetime_utils import ensure_utc, utc_now
from app.utils.exceptions import TransactionFailure


@dataclass
class RunStats:
    """Counters of one return pass."""

    started_at: datetime
    found: int = 0
    processed: int = 0
    skipped: int = 0
    errors: int = 0
    total_amount_distributed: Decimal = field(default_factory=lambda: Decimal("0"))
    duration_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["started_at"] = self.started_at.isoformat()
        data["total_amount_distributed"] = str(self.total_amount_distributed)
        return data


class InvestmentReturnProcessor:
    """Applies matured investment returns."""

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize return processor.

        Args:
            session_maker: Session factory; every investment is processed
                in its own transaction
            clock: Source of current time
        """
        self.session_maker = session_maker
        self.runner = TransactionRunner(session_maker)
        self.clock = clock
        self.last_stats: RunStats | None = None
        self._guard = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._guard.locked()

    async def run_scheduled_return_pass(
        self, now: datetime | None = None
    ) -> RunStats | None:
        """
        Run one return pass.

        Args:
            now: Evaluation time (defaults to clock)

        Returns:
            Run statistics, or None if a pass was already running

        Raises:
            TransactionFailure: Active investment snapshot could not be read
        """
        # No await between check and acquire
        if self._guard.locked():
            logger.warning(
                "Investment return pass already in progress, skipping trigger"
            )
            return None

        async with self._guard:
            stats = await self._run_pass(ensure_utc(now or self.clock()))
            self.last_stats = stats
            return stats

    async def _run_pass(self, now: datetime) -> RunStats:
        stats = RunStats(started_at=now)
        started = time.monotonic()
        logger.info(f"Investment return pass started at {now.isoformat()}")

        try:
            investments = await self.runner.run(
                lambda session: InvestmentRepository(session).find_active(),
                operation="active investment snapshot",
            )
        except TransactionFailure as e:
            logger.critical(
                f"Investment return pass aborted, snapshot failed: {e}"
            )
            raise

        stats.found = len(investments)

        for investment in investments:
            await self._process_investment(investment, now, stats)

        stats.duration_seconds = round(time.monotonic() - started, 3)
        logger.bind(**stats.to_dict()).info(
            f"Investment return pass complete: found={stats.found}, "
            f"processed={stats.processed}, skipped={stats.skipped}, "
            f"errors={stats.errors}, "
            f"distributed={stats.total_amount_distributed}, "
            f"duration={stats.duration_seconds}s"
        )
        return stats

    async def _process_investment(
        self, investment: Investment, now: datetime, stats: RunStats
    ) -> None:
        investment_id = investment.id
        try:
            amount = await self.runner.run(
                lambda session: self._apply_return(session, investment_id, now),
                operation=f"investment return #{investment_id}",
            )
        except Exception as e:
            stats.errors += 1
            logger.bind(investment_id=investment_id).error(
                f"Investment {investment_id} return failed: "
                f"{type(e).__name__}: {e}"
            )
            return

        if amount is None:
            stats.skipped += 1
            return

        stats.processed += 1
        stats.total_amount_distributed += amount

    async def _apply_return(
        self, session: AsyncSession, investment_id: int, now: datetime
    ) -> Decimal | None:
        """
        Credit one matured return.

        Returns:
            Credited amount, or None when the investment is skipped
        """
        investment = await InvestmentRepository(session).get_for_update(
            investment_id
        )
        if investment is None or not investment.is_active:
            logger.debug(f"Investment {investment_id} no longer active")
            return None

        product = await InvestmentProductRepository(session).get_by_id(
            investment.product_id
        )
        if product is None:
            logger.warning(
                f"Data integrity: investment {investment_id} references "
                f"missing product {investment.product_id}"
            )
            return None

        account = await AccountRepository(session).get_by_id(
            investment.account_id
        )
        if account is None:
            logger.warning(
                f"Data integrity: investment {investment_id} references "
                f"missing account {investment.account_id}"
            )
            return None

        last_return_date = ensure_utc(investment.last_return_date)
        if not is_return_due(
            last_return_date,
            now,
            product.return_period_unit,
            product.return_period,
        ):
            return None

        amount = calculate_return_amount(
            investment.amount_invested, product.return_rate
        )
        if amount <= 0:
            logger.info(
                f"Investment {investment_id} return is {amount}, skipping"
            )
            return None

        await BalanceManager(session).credit(account.id, amount)
        investment.last_return_date = now
        await EarningRepository(session).create(
            account_id=account.id,
            amount=amount,
            source=EarningSource.INVESTMENT.value,
            status=EarningStatus.CREDITED.value,
            description=f"Return from {product.name}",
            reference_type="investment",
            reference_id=investment.id,
            idempotency_key=investment_idempotency_key(
                investment.id, last_return_date
            ),
            created_at=now,
        )

        logger.bind(
            investment_id=investment_id,
            account_id=account.id,
            amount=str(amount),
        ).info(
            f"Investment {investment_id} return {amount} credited to "
            f"account {account.id}"
        )
        return amount
