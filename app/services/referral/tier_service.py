"""
Referral tier service.

Links new accounts to their referrer and promotes the referrer's tier
as their referral count grows.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import ReferralTier
from app.repositories.account_repository import AccountRepository
from app.services.referral.config import tier_for_referral_count
from app.utils.exceptions import ConflictError, NotFoundError, ValidationError


class ReferralTierService:
    """Referral registration and tier promotion."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.account_repo = AccountRepository(session)

    async def register_referral(
        self, account_id: int, referrer_id: int
    ) -> ReferralTier:
        """
        Attach account to referrer and update referrer's tier.

        Tiers only move up; a lower computed tier never demotes an
        account whose tier was set higher.

        Args:
            account_id: Newly referred account
            referrer_id: Account that referred it

        Returns:
            Referrer's tier after registration

        Raises:
            ValidationError: Account refers itself
            NotFoundError: Either account is missing
            ConflictError: Account already has a referrer
        """
        if account_id == referrer_id:
            raise ValidationError("Account cannot refer itself")

        account = await self.account_repo.get_for_update(account_id)
        if account is None:
            raise NotFoundError(f"Account {account_id} not found")
        if account.referred_by_id is not None:
            raise ConflictError(
                f"Account {account_id} already referred by "
                f"{account.referred_by_id}"
            )

        referrer = await self.account_repo.get_by_id(referrer_id)
        if referrer is None:
            raise NotFoundError(f"Referrer {referrer_id} not found")

        account.referred_by_id = referrer_id
        await self.session.flush()

        count = await self.account_repo.increment_referral_count(referrer_id)
        current = referrer.tier
        earned = tier_for_referral_count(count)

        if earned.ordinal > current.ordinal:
            await self.account_repo.set_referral_tier(referrer_id, earned)
            logger.info(
                f"Account {referrer_id} promoted {current.value} -> "
                f"{earned.value} ({count} referrals)"
            )
            return earned
        return current
