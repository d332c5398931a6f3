"""
Referral services package.

- config: tier thresholds
- commission_calculator: commission rate and amount
- commission_service: crediting commission to referrers
- tier_service: referral registration and tier promotion
"""

from app.services.referral.commission_calculator import CommissionCalculator
from app.services.referral.commission_service import (
    ReferralCommissionService,
    referral_idempotency_key,
)
from app.services.referral.config import tier_for_referral_count
from app.services.referral.tier_service import ReferralTierService

__all__ = [
    "CommissionCalculator",
    "ReferralCommissionService",
    "ReferralTierService",
    "referral_idempotency_key",
    "tier_for_referral_count",
]
