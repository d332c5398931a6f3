"""
Global settings repository.

Key/value access to site settings used by commission and withdrawal rules.
"""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import (
    SETTING_MINIMUM_WITHDRAWAL,
    SETTING_REFERRAL_BONUS,
    SETTING_REFERRAL_LEVEL_INCREMENT,
)
from app.config.settings import settings
from app.models.site_setting import SiteSetting
from app.repositories.base import BaseRepository


class GlobalSettingsRepository(BaseRepository[SiteSetting]):
    """Site settings repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize settings repository."""
        super().__init__(SiteSetting, session)

    async def get_value(self, key: str) -> str | None:
        """
        Get raw setting value.

        Args:
            key: Setting key

        Returns:
            Stored value or None if the key is absent
        """
        stmt = select(SiteSetting.value).where(SiteSetting.key == key)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_values(self, *keys: str) -> dict[str, str]:
        """Get several settings in one query; absent keys are omitted."""
        stmt = select(SiteSetting.key, SiteSetting.value).where(
            SiteSetting.key.in_(keys)
        )
        result = await self.session.execute(stmt)
        return {row.key: row.value for row in result}

    async def set_value(
        self, key: str, value: str | Decimal, category: str = "general"
    ) -> SiteSetting:
        """
        Create or overwrite setting.

        Args:
            key: Setting key
            value: New value (stored as text)
            category: Setting category for new keys

        Returns:
            Stored setting
        """
        setting = await self.get_by(key=key)
        if setting is None:
            return await self.create(key=key, value=str(value), category=category)

        setting.value = str(value)
        await self.session.flush()
        return setting

    async def ensure_defaults(self) -> list[str]:
        """
        Insert default values for missing settings.

        Existing values are never overwritten.

        Returns:
            Keys that were inserted
        """
        defaults = {
            SETTING_REFERRAL_BONUS: (
                settings.default_referral_bonus_percent, "referral"
            ),
            SETTING_REFERRAL_LEVEL_INCREMENT: (
                settings.default_referral_level_increment_percent, "referral"
            ),
            SETTING_MINIMUM_WITHDRAWAL: (Decimal("0"), "withdrawal"),
        }
        existing = await self.get_values(*defaults)

        inserted = []
        for key, (value, category) in defaults.items():
            if key in existing:
                continue
            await self.create(key=key, value=str(value), category=category)
            inserted.append(key)
        return inserted
