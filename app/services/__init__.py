"""
Services.

Business logic layer.
"""

# Core Services
from app.services.deposit import DepositService
from app.services.earnings_stats_service import (
    EarningsStatsService,
    EarningsSummary,
)
from app.services.investment import (
    CreatedInvestment,
    InvestmentReturnProcessor,
    InvestmentService,
    RunStats,
)

# Ledger
from app.services.ledger import BalanceManager, TransactionRunner

# Referral Package
from app.services.referral import (
    CommissionCalculator,
    ReferralCommissionService,
    ReferralTierService,
)
from app.services.wallet_history_service import (
    WalletHistoryEntry,
    WalletHistoryPage,
    WalletHistoryService,
)
from app.services.withdrawal_service import WithdrawalService


__all__ = [
    # Ledger
    "BalanceManager",
    "TransactionRunner",
    # Referral Package
    "CommissionCalculator",
    "ReferralCommissionService",
    "ReferralTierService",
    # Core
    "CreatedInvestment",
    "DepositService",
    "EarningsStatsService",
    "EarningsSummary",
    "InvestmentReturnProcessor",
    "InvestmentService",
    "RunStats",
    "WalletHistoryEntry",
    "WalletHistoryPage",
    "WalletHistoryService",
    "WithdrawalService",
]
