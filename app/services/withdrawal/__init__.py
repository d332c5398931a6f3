"""
Withdrawal services package.

- withdrawal_validator: input and minimum amount checks
- withdrawal_request_handler: request creation with fund reservation
- withdrawal_lifecycle_handler: approval and rejection (with refund)

The WithdrawalService facade lives in app.services.withdrawal_service.
"""

from app.services.withdrawal.withdrawal_lifecycle_handler import (
    WithdrawalLifecycleHandler,
)
from app.services.withdrawal.withdrawal_request_handler import (
    WithdrawalRequestHandler,
)
from app.services.withdrawal.withdrawal_validator import (
    ValidatedWithdrawal,
    WithdrawalValidator,
)

__all__ = [
    "ValidatedWithdrawal",
    "WithdrawalLifecycleHandler",
    "WithdrawalRequestHandler",
    "WithdrawalValidator",
]
