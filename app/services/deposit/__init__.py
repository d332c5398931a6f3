"""
Deposit services package.

- lifecycle: recharge request creation and review
- service: DepositService facade
"""

from app.services.deposit.service import DepositService

__all__ = [
    "DepositService",
]
