"""
Investment repository.

Data access layer for Investment model.
"""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import InvestmentStatus
from app.models.investment import Investment
from app.models.investment_product import InvestmentProduct
from app.repositories.base import BaseRepository


class InvestmentRepository(BaseRepository[Investment]):
    """Investment repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize investment repository."""
        super().__init__(Investment, session)

    async def find_active(self) -> list[Investment]:
        """
        Snapshot all active investments in one read.

        Returns:
            Active investments, oldest first
        """
        stmt = (
            select(Investment)
            .where(Investment.status == InvestmentStatus.ACTIVE.value)
            .order_by(Investment.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_by_account(
        self, account_id: int, status: InvestmentStatus | None = None
    ) -> list[Investment]:
        """
        Get investments of an account.

        Args:
            account_id: Account ID
            status: Optional status filter

        Returns:
            List of investments
        """
        if status is None:
            return await self.find_by(account_id=account_id)
        return await self.find_by(account_id=account_id, status=status.value)

    async def find_with_product_name(
        self,
        account_id: int,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> list[tuple[Investment, str | None]]:
        """
        Get investments of an account with their product names.

        Args:
            account_id: Account ID
            since: Created at or after this time
            until: Created at or before this time

        Returns:
            (investment, product name) pairs, newest first; the name is
            None when the product no longer exists
        """
        stmt = (
            select(Investment, InvestmentProduct.name)
            .outerjoin(
                InvestmentProduct, Investment.product_id == InvestmentProduct.id
            )
            .where(Investment.account_id == account_id)
        )
        if since is not None:
            stmt = stmt.where(Investment.created_at >= since)
        if until is not None:
            stmt = stmt.where(Investment.created_at <= until)

        result = await self.session.execute(
            stmt.order_by(Investment.created_at.desc())
        )
        return [(row[0], row[1]) for row in result.all()]
