"""
Withdrawal service - Main service facade.

Delegates to specialized modules:
- withdrawal/withdrawal_validator: Input and minimum amount validation
- withdrawal/withdrawal_request_handler: Request creation and reservation
- withdrawal/withdrawal_lifecycle_handler: Approval and rejection

Every public operation runs in its own transaction.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.enums import RequestStatus, ReviewDecision
from app.models.withdrawal import Withdrawal
from app.repositories.withdrawal_repository import WithdrawalRepository
from app.services.ledger.transaction_runner import TransactionRunner
from app.services.withdrawal.withdrawal_lifecycle_handler import (
    WithdrawalLifecycleHandler,
)
from app.services.withdrawal.withdrawal_request_handler import (
    WithdrawalRequestHandler,
)
from app.services.withdrawal.withdrawal_validator import WithdrawalValidator
from app.utils.datetime_utils import utc_now
from app.validators import require_choice, require_id


class WithdrawalService:
    """Withdrawal state machine: pending -> approved | rejected."""

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.session_maker = session_maker
        self.runner = TransactionRunner(session_maker)
        self.clock = clock

    async def request_withdrawal(
        self,
        account_id: int,
        amount: Any,
        payment_method: Any,
        payment_details: Any,
    ) -> Withdrawal:
        """
        Request withdrawal, reserving amount from balance.

        Args:
            account_id: Account ID
            amount: Amount to withdraw
            payment_method: easypaisa, jazzcash or bank
            payment_details: Destination account details

        Returns:
            Pending withdrawal

        Raises:
            ValidationError: Malformed input or amount below minimum
            InsufficientFundsError: Balance lower than amount
            NotFoundError: Account missing
            TransactionFailure: Storage failure
        """
        # Settings are read before the write transaction starts
        async with self.session_maker() as session:
            request = await WithdrawalValidator(session).validate(
                account_id, amount, payment_method, payment_details
            )

        return await self.runner.run(
            lambda session: WithdrawalRequestHandler(session).create_request(
                request
            ),
            operation="request withdrawal",
        )

    async def review_withdrawal(
        self, withdrawal_id: int, decision: ReviewDecision | str
    ) -> Withdrawal:
        """
        Approve or reject pending withdrawal.

        Args:
            withdrawal_id: Withdrawal ID
            decision: approved or rejected

        Returns:
            Reviewed withdrawal

        Raises:
            ValidationError: Invalid decision
            NotFoundError: Withdrawal missing
            ConflictError: Withdrawal already processed
            TransactionFailure: Storage failure
        """
        require_id(withdrawal_id, "withdrawal_id")
        decision = require_choice(decision, ReviewDecision, "decision")
        now = self.clock()

        return await self.runner.run(
            lambda session: WithdrawalLifecycleHandler(session).review(
                withdrawal_id, decision, now
            ),
            operation="review withdrawal",
        )

    async def get_pending_withdrawals(
        self, limit: int | None = None
    ) -> list[Withdrawal]:
        """Get pending withdrawals for review, oldest first."""
        async with self.session_maker() as session:
            return await WithdrawalRepository(session).find_pending(limit)

    async def get_account_withdrawals(
        self, account_id: int, status: RequestStatus | None = None
    ) -> list[Withdrawal]:
        """Get withdrawal history of account, oldest first."""
        filters = {"account_id": account_id}
        if status is not None:
            filters["status"] = status.value
        async with self.session_maker() as session:
            return await WithdrawalRepository(session).find_by(**filters)
