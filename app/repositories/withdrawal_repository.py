"""
Withdrawal repository.

Data access layer for Withdrawal model.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import RequestStatus
from app.models.withdrawal import Withdrawal
from app.repositories.base import BaseRepository


class WithdrawalRepository(BaseRepository[Withdrawal]):
    """Withdrawal repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize withdrawal repository."""
        super().__init__(Withdrawal, session)

    async def find_pending(self, limit: int | None = None) -> list[Withdrawal]:
        """Get pending withdrawals, oldest first."""
        return await self.find_by(
            limit=limit, status=RequestStatus.PENDING.value
        )

    async def sum_amount(
        self, account_id: int, status: RequestStatus
    ) -> Decimal:
        """
        Sum withdrawal amounts for account by status.

        Args:
            account_id: Account ID
            status: Withdrawal status

        Returns:
            Total amount (0 if no rows)
        """
        stmt = select(func.coalesce(func.sum(Withdrawal.amount), 0)).where(
            Withdrawal.account_id == account_id,
            Withdrawal.status == status.value,
        )
        result = await self.session.execute(stmt)
        total = result.scalar()
        return Decimal(str(total)) if total else Decimal("0")

    async def find_processed(
        self,
        account_id: int,
        status: RequestStatus,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> list[Withdrawal]:
        """Get reviewed withdrawals of an account, newest review first."""
        stmt = select(Withdrawal).where(
            Withdrawal.account_id == account_id,
            Withdrawal.status == status.value,
        )
        if since is not None:
            stmt = stmt.where(Withdrawal.processed_at >= since)
        if until is not None:
            stmt = stmt.where(Withdrawal.processed_at <= until)

        result = await self.session.execute(
            stmt.order_by(Withdrawal.processed_at.desc())
        )
        return list(result.scalars().all())
