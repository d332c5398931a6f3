"""
Withdrawal validator.

Checks request input and the configured withdrawal minimum before any
funds are reserved.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import SETTING_MINIMUM_WITHDRAWAL
from app.models.enums import PaymentMethod
from app.repositories.global_settings_repository import GlobalSettingsRepository
from app.utils.exceptions import SettingsUnavailableError, ValidationError
from app.validators import require_amount, require_choice, require_id, require_text


@dataclass(frozen=True)
class ValidatedWithdrawal:
    """Normalized withdrawal request input."""

    account_id: int
    amount: Decimal
    payment_method: PaymentMethod
    payment_details: str


class WithdrawalValidator:
    """Validates withdrawal requests."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.settings_repo = GlobalSettingsRepository(session)

    async def get_min_withdrawal_amount(self) -> Decimal:
        """
        Get minimum withdrawal amount from site settings.

        Returns:
            Minimum amount (0 when not configured)

        Raises:
            SettingsUnavailableError: Setting unreadable or not a number
        """
        try:
            raw = await self.settings_repo.get_value(SETTING_MINIMUM_WITHDRAWAL)
        except SQLAlchemyError as e:
            raise SettingsUnavailableError(
                f"Withdrawal settings unavailable: {e}"
            ) from e

        if raw is None:
            return Decimal("0")
        try:
            value = Decimal(raw.strip())
        except InvalidOperation as e:
            raise SettingsUnavailableError(
                f"Setting {SETTING_MINIMUM_WITHDRAWAL}={raw!r} is not a number"
            ) from e
        if not value.is_finite():
            raise SettingsUnavailableError(
                f"Setting {SETTING_MINIMUM_WITHDRAWAL}={raw!r} is not finite"
            )
        return value

    async def validate(
        self,
        account_id: Any,
        amount: Any,
        payment_method: Any,
        payment_details: Any,
    ) -> ValidatedWithdrawal:
        """
        Validate withdrawal request.

        Raises:
            ValidationError: Malformed input or amount below minimum
            SettingsUnavailableError: Minimum could not be read
        """
        account_id = require_id(account_id, "account_id")
        amount = require_amount(amount)
        method = require_choice(payment_method, PaymentMethod, "payment_method")
        details = require_text(payment_details, "payment_details")

        minimum = await self.get_min_withdrawal_amount()
        if amount < minimum:
            raise ValidationError(
                f"Minimum withdrawal amount is {minimum}"
            )

        return ValidatedWithdrawal(
            account_id=account_id,
            amount=amount,
            payment_method=method,
            payment_details=details,
        )
