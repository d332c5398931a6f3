"""
Earnings statistics service.

Provides earnings statistics for accounts:
- Summary (total earned, pending and completed withdrawals, balance)
- Credited earnings grouped by source
- Period-based earnings (today, week, month)
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import EarningSource, EarningStatus, RequestStatus
from app.repositories.account_repository import AccountRepository
from app.repositories.earning_repository import EarningRepository
from app.repositories.withdrawal_repository import WithdrawalRepository
from app.utils.datetime_utils import utc_now
from app.utils.exceptions import NotFoundError, TransactionFailure


@dataclass(frozen=True)
class EarningsSummary:
    """Earnings overview of one account."""

    total_earnings: Decimal
    pending_withdrawals: Decimal
    withdrawn: Decimal
    available_balance: Decimal


class EarningsStatsService:
    """Service for calculating and retrieving earnings statistics."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize earnings stats service.

        Args:
            session: Database session
        """
        self.session = session
        self.account_repo = AccountRepository(session)
        self.earning_repo = EarningRepository(session)
        self.withdrawal_repo = WithdrawalRepository(session)

    async def get_summary(self, account_id: int) -> EarningsSummary:
        """
        Get earnings summary for account.

        Total earnings counts every earning regardless of status.

        Args:
            account_id: Account ID

        Returns:
            EarningsSummary

        Raises:
            NotFoundError: Account missing
            TransactionFailure: Query failed
        """
        try:
            balance = await self.account_repo.get_balance(account_id)
            if balance is None:
                raise NotFoundError(f"Account {account_id} not found")

            return EarningsSummary(
                total_earnings=await self.earning_repo.sum_amount(account_id),
                pending_withdrawals=await self.withdrawal_repo.sum_amount(
                    account_id, RequestStatus.PENDING
                ),
                withdrawn=await self.withdrawal_repo.sum_amount(
                    account_id, RequestStatus.APPROVED
                ),
                available_balance=balance,
            )
        except SQLAlchemyError as e:
            logger.opt(exception=e).error(
                f"Failed to get earnings summary for account {account_id}: {e}"
            )
            raise TransactionFailure(f"Earnings summary failed: {e}") from e

    async def get_earnings_by_source(
        self, account_id: int, since: datetime | None = None
    ) -> dict[str, Decimal]:
        """
        Get credited earnings grouped by source.

        Args:
            account_id: Account ID
            since: Only earnings created at or after this time

        Returns:
            Mapping with a total for every source (zero when absent)
        """
        try:
            totals = await self.earning_repo.sum_by_source(
                account_id, EarningStatus.CREDITED, since=since
            )
        except SQLAlchemyError as e:
            logger.opt(exception=e).error(
                f"Failed to get earnings breakdown for account {account_id}: {e}"
            )
            raise TransactionFailure(f"Earnings breakdown failed: {e}") from e

        breakdown = {source.value: Decimal("0") for source in EarningSource}
        breakdown.update(totals)
        return breakdown

    async def get_period_earnings(
        self, account_id: int, period_days: int
    ) -> Decimal:
        """
        Get credited earnings for the last period_days calendar days.

        Args:
            account_id: Account ID
            period_days: 1 for today, 7 for week, 30 for month

        Returns:
            Total earnings for the period
        """
        start_date = utc_now().replace(
            hour=0, minute=0, second=0, microsecond=0
        ) - timedelta(days=period_days - 1)
        return await self.earning_repo.sum_amount(
            account_id, status=EarningStatus.CREDITED, since=start_date
        )

    async def get_today_earnings(self, account_id: int) -> Decimal:
        return await self.get_period_earnings(account_id, 1)

    async def get_week_earnings(self, account_id: int) -> Decimal:
        return await self.get_period_earnings(account_id, 7)

    async def get_month_earnings(self, account_id: int) -> Decimal:
        return await self.get_period_earnings(account_id, 30)
