"""
Investment services package.

- maturity: elapsed-period and return amount math
- service: investment creation and principal withdrawal
- return_processor: periodic return pass
"""

from app.services.investment.return_processor import (
    InvestmentReturnProcessor,
    RunStats,
)
from app.services.investment.service import CreatedInvestment, InvestmentService

__all__ = [
    "CreatedInvestment",
    "InvestmentReturnProcessor",
    "InvestmentService",
    "RunStats",
]
