"""
Recharge request lifecycle.

- creator: request creation
- reviewer: approval (with credit) and rejection
"""

from app.services.deposit.lifecycle.creator import RechargeRequestCreator
from app.services.deposit.lifecycle.reviewer import RechargeRequestReviewer

__all__ = [
    "RechargeRequestCreator",
    "RechargeRequestReviewer",
]
