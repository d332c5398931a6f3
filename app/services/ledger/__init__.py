"""
Ledger core.

Transaction boundary and atomic balance adjustment shared by every
money-moving flow.
"""

from app.services.ledger.balance_manager import BalanceManager
from app.services.ledger.transaction_runner import TransactionRunner

__all__ = [
    "BalanceManager",
    "TransactionRunner",
]
