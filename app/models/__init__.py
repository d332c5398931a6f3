"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from app.models.account import Account
from app.models.base import Base
from app.models.earning import Earning
from app.models.enums import (
    EarningSource,
    EarningStatus,
    InvestmentStatus,
    PaymentMethod,
    ProductStatus,
    ReferralTier,
    RequestStatus,
    ReturnPeriodUnit,
    ReviewDecision,
    WalletEntryType,
)
from app.models.investment import Investment
from app.models.investment_product import InvestmentProduct
from app.models.recharge_request import RechargeRequest
from app.models.site_setting import SiteSetting
from app.models.withdrawal import Withdrawal

__all__ = [
    "Account",
    "Base",
    "Earning",
    "EarningSource",
    "EarningStatus",
    "Investment",
    "InvestmentProduct",
    "InvestmentStatus",
    "PaymentMethod",
    "ProductStatus",
    "RechargeRequest",
    "ReferralTier",
    "RequestStatus",
    "ReturnPeriodUnit",
    "ReviewDecision",
    "SiteSetting",
    "WalletEntryType",
    "Withdrawal",
]
