"""
Referral commission calculator.

Commission rate grows linearly with the referrer's tier:
rate = referral_bonus + tier_ordinal * referral_level_bonus_increment.
"""

from decimal import ROUND_DOWN, Decimal, InvalidOperation

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import (
    MONEY_QUANTUM,
    SETTING_REFERRAL_BONUS,
    SETTING_REFERRAL_LEVEL_INCREMENT,
)
from app.config.settings import settings
from app.models.enums import ReferralTier
from app.repositories.global_settings_repository import GlobalSettingsRepository
from app.utils.exceptions import SettingsUnavailableError


class CommissionCalculator:
    """Computes referral commission rates and amounts."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize calculator.

        Args:
            session: Database session used to read site settings
        """
        self.session = session
        self.settings_repo = GlobalSettingsRepository(session)

    async def compute_commission_rate(self, tier: ReferralTier) -> Decimal:
        """
        Compute commission percent for a referrer tier.

        Missing settings fall back to configured defaults (10 and 5).

        Args:
            tier: Referrer's tier

        Returns:
            Commission rate in percent

        Raises:
            SettingsUnavailableError: Settings store unreadable or value
                not a non-negative number
        """
        try:
            values = await self.settings_repo.get_values(
                SETTING_REFERRAL_BONUS, SETTING_REFERRAL_LEVEL_INCREMENT
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to read referral settings: {e}")
            raise SettingsUnavailableError(
                f"Referral settings unavailable: {e}"
            ) from e

        base = self._parse_percent(
            values.get(SETTING_REFERRAL_BONUS),
            settings.default_referral_bonus_percent,
            SETTING_REFERRAL_BONUS,
        )
        increment = self._parse_percent(
            values.get(SETTING_REFERRAL_LEVEL_INCREMENT),
            settings.default_referral_level_increment_percent,
            SETTING_REFERRAL_LEVEL_INCREMENT,
        )
        return base + tier.ordinal * increment

    @staticmethod
    def calculate_commission(amount: Decimal, rate: Decimal) -> Decimal:
        """
        Apply percent rate to amount, truncated to ledger precision.

        Args:
            amount: Invested amount
            rate: Commission rate in percent

        Returns:
            Commission amount
        """
        return (amount * rate / Decimal("100")).quantize(
            MONEY_QUANTUM, rounding=ROUND_DOWN
        )

    @staticmethod
    def _parse_percent(raw: str | None, default: Decimal, key: str) -> Decimal:
        if raw is None:
            return default
        try:
            value = Decimal(raw.strip())
        except (InvalidOperation, AttributeError) as e:
            raise SettingsUnavailableError(
                f"Setting {key}={raw!r} is not a number"
            ) from e
        if not value.is_finite() or value < 0:
            raise SettingsUnavailableError(
                f"Setting {key}={raw!r} must be a non-negative number"
            )
        return value
