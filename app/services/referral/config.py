"""
Referral system configuration.

Tier promotion thresholds and tier lookup.
"""

from app.config.business_constants import REFERRAL_TIER_THRESHOLDS
from app.models.enums import ReferralTier


def tier_for_referral_count(referral_count: int) -> ReferralTier:
    """
    Get tier earned by a number of direct referrals.

    Args:
        referral_count: Number of accounts referred

    Returns:
        Highest tier whose threshold is reached
    """
    for threshold, tier in REFERRAL_TIER_THRESHOLDS:
        if referral_count >= threshold:
            return ReferralTier(tier)
    return ReferralTier.BRONZE
