"""
Ledger exceptions.

Every failure surfaced by the engine is one of these types. Callers
can branch on the class without parsing messages.
"""


class LedgerError(Exception):
    """Base class for all ledger errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """Input failed validation before any state was touched."""


class NotFoundError(LedgerError):
    """Referenced entity does not exist."""


class AccessDeniedError(LedgerError):
    """Caller does not own the referenced entity."""


class InsufficientFundsError(LedgerError):
    """Balance is lower than the requested debit."""


class ConflictError(LedgerError):
    """
    Entity is not in a state that allows the operation.

    Raised for reviews of already-processed requests and for
    withdrawing an investment that is no longer active.
    """


class TransactionFailure(LedgerError):
    """Storage failure; the transaction was rolled back."""


class SettingsUnavailableError(TransactionFailure):
    """Site settings could not be read or parsed."""
