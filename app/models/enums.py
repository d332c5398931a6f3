"""
Enumerations shared by ledger models and services.

Values are stored as plain strings in the database.
"""

from enum import Enum


class ReferralTier(str, Enum):
    """Referral tier of an account, ordered from lowest to highest."""

    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    DIAMOND = "diamond"
    PLATINUM = "platinum"

    @property
    def ordinal(self) -> int:
        """Position of the tier, 0 for the lowest."""
        return _TIER_ORDER.index(self)


_TIER_ORDER = [
    ReferralTier.BRONZE,
    ReferralTier.SILVER,
    ReferralTier.GOLD,
    ReferralTier.DIAMOND,
    ReferralTier.PLATINUM,
]


class ProductStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class ReturnPeriodUnit(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class InvestmentStatus(str, Enum):
    ACTIVE = "active"
    WITHDRAWN = "withdrawn"


class EarningSource(str, Enum):
    REFERRAL = "referral"
    INVESTMENT = "investment"
    TASK = "task"
    OTHER = "other"


class EarningStatus(str, Enum):
    PENDING = "pending"
    CREDITED = "credited"
    WITHDRAWN = "withdrawn"


class RequestStatus(str, Enum):
    """Status of a withdrawal or recharge request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReviewDecision(str, Enum):
    """Admin decision on a pending request."""

    APPROVED = "approved"
    REJECTED = "rejected"


class PaymentMethod(str, Enum):
    EASYPAISA = "easypaisa"
    JAZZCASH = "jazzcash"
    BANK = "bank"


class WalletEntryType(str, Enum):
    """Kind of movement shown in an account's wallet history."""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    INVESTMENT_MADE = "investment_made"
    INVESTMENT_RETURN = "investment_return"
    REFERRAL_COMMISSION = "referral_commission"
    TASK_REWARD = "task_reward"
    OTHER_EARNING = "other_earning"
