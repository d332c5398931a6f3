"""
Business logic constants for the ledger engine.

Central location for business rules and constants used across the application.
"""

from decimal import Decimal

# All stored amounts carry 8 decimal places (DECIMAL(18, 8))
MONEY_QUANTUM = Decimal("0.00000001")

# Average days per month used by the monthly maturity approximation
DAYS_PER_MONTH_APPROXIMATION = 30.44

MS_PER_DAY = 1000 * 60 * 60 * 24
MS_PER_WEEK = MS_PER_DAY * 7

# Site setting keys
SETTING_REFERRAL_BONUS = "referral_bonus"
SETTING_REFERRAL_LEVEL_INCREMENT = "referral_level_bonus_increment"
SETTING_MINIMUM_WITHDRAWAL = "minimum_withdrawal"

# Referral count thresholds for tier promotion, highest first
REFERRAL_TIER_THRESHOLDS = (
    (40, "platinum"),
    (20, "diamond"),
    (10, "gold"),
    (5, "silver"),
)

# Scheduler job identifiers
RETURN_PASS_JOB_ID = "investment_returns"
RETURN_PASS_LOCK_KEY = "investment_return_pass"
