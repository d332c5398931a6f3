"""
Earning repository.

Data access layer for Earning model, including aggregations used by
earnings statistics.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.earning import Earning
from app.models.enums import EarningSource, EarningStatus
from app.repositories.base import BaseRepository


class EarningRepository(BaseRepository[Earning]):
    """Earning repository with aggregation queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize earning repository."""
        super().__init__(Earning, session)

    async def exists_by_idempotency_key(self, key: str) -> bool:
        return await self.exists(idempotency_key=key)

    async def sum_amount(
        self,
        account_id: int,
        status: EarningStatus | None = None,
        source: EarningSource | None = None,
        since: datetime | None = None,
    ) -> Decimal:
        """
        Sum earning amounts for account.

        Args:
            account_id: Account ID
            status: Optional status filter
            source: Optional source filter
            since: Only earnings created at or after this time

        Returns:
            Total amount (0 if no rows)
        """
        stmt = select(func.coalesce(func.sum(Earning.amount), 0)).where(
            Earning.account_id == account_id
        )
        if status is not None:
            stmt = stmt.where(Earning.status == status.value)
        if source is not None:
            stmt = stmt.where(Earning.source == source.value)
        if since is not None:
            stmt = stmt.where(Earning.created_at >= since)

        result = await self.session.execute(stmt)
        total = result.scalar()
        return Decimal(str(total)) if total else Decimal("0")

    async def sum_by_source(
        self,
        account_id: int,
        status: EarningStatus,
        since: datetime | None = None,
    ) -> dict[str, Decimal]:
        """
        Sum earning amounts grouped by source.

        Args:
            account_id: Account ID
            status: Status filter
            since: Only earnings created at or after this time

        Returns:
            Mapping of source value to total (sources without rows omitted)
        """
        stmt = (
            select(Earning.source, func.sum(Earning.amount).label("total"))
            .where(
                Earning.account_id == account_id,
                Earning.status == status.value,
            )
            .group_by(Earning.source)
        )
        if since is not None:
            stmt = stmt.where(Earning.created_at >= since)

        result = await self.session.execute(stmt)
        return {
            row.source: Decimal(str(row.total))
            for row in result
            if row.total is not None
        }

    async def find_by_sources(
        self,
        account_id: int,
        status: EarningStatus,
        sources: list[EarningSource],
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> list[Earning]:
        """
        Get earnings of an account from the given sources, newest first.

        Args:
            account_id: Account ID
            status: Status filter
            sources: Earning sources to include
            since: Created at or after this time
            until: Created at or before this time

        Returns:
            List of earnings
        """
        stmt = select(Earning).where(
            Earning.account_id == account_id,
            Earning.status == status.value,
            Earning.source.in_([source.value for source in sources]),
        )
        if since is not None:
            stmt = stmt.where(Earning.created_at >= since)
        if until is not None:
            stmt = stmt.where(Earning.created_at <= until)

        result = await self.session.execute(stmt.order_by(Earning.created_at.desc()))
        return list(result.scalars().all())
