"""
Account repository.

Data access layer for Account model. Balance writes go through
BalanceManager, not through this repository.
"""

from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.account import Account
from app.models.enums import ReferralTier
from app.repositories.base import BaseRepository


class AccountRepository(BaseRepository[Account]):
    """Account repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize account repository."""
        super().__init__(Account, session)

    async def get_balance(self, account_id: int) -> Decimal | None:
        """
        Read balance straight from the database.

        Args:
            account_id: Account ID

        Returns:
            Current balance or None if account does not exist
        """
        stmt = select(Account.balance).where(Account.id == account_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_referrer_id(self, account_id: int) -> int | None:
        stmt = select(Account.referred_by_id).where(Account.id == account_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def increment_referral_count(self, account_id: int) -> int | None:
        """
        Atomically increment referral count.

        Args:
            account_id: Referrer account ID

        Returns:
            New referral count or None if account does not exist
        """
        stmt = (
            update(Account)
            .where(Account.id == account_id)
            .values(referral_count=Account.referral_count + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            return None

        count_stmt = select(Account.referral_count).where(
            Account.id == account_id
        )
        return (await self.session.execute(count_stmt)).scalar_one()

    async def set_referral_tier(
        self, account_id: int, tier: ReferralTier
    ) -> None:
        stmt = (
            update(Account)
            .where(Account.id == account_id)
            .values(referral_tier=tier.value)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
