"""
Deposit service facade.

Deposit (recharge) approval flow: pending -> approved | rejected.
Delegates to lifecycle modules:
- RechargeRequestCreator: request creation
- RechargeRequestReviewer: approval with credit, rejection
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.enums import ReviewDecision
from app.models.recharge_request import RechargeRequest
from app.repositories.recharge_request_repository import (
    RechargeRequestRepository,
)
from app.services.deposit.lifecycle import (
    RechargeRequestCreator,
    RechargeRequestReviewer,
)
from app.services.ledger.transaction_runner import TransactionRunner
from app.utils.datetime_utils import utc_now
from app.validators import require_amount, require_choice, require_id, require_text


class DepositService:
    """Deposit service facade."""

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.session_maker = session_maker
        self.runner = TransactionRunner(session_maker)
        self.clock = clock

    async def request_deposit(
        self, account_id: int, amount: Any, proof: Any
    ) -> RechargeRequest:
        """
        Create pending recharge request.

        Args:
            account_id: Account to credit on approval
            amount: Deposited amount
            proof: Reference to proof-of-payment artifact

        Returns:
            Pending recharge request

        Raises:
            ValidationError: Malformed input
            NotFoundError: Account missing
        """
        account_id = require_id(account_id, "account_id")
        amount = require_amount(amount)
        proof = require_text(proof, "proof")

        return await self.runner.run(
            lambda session: RechargeRequestCreator(session).create(
                account_id, amount, proof
            ),
            operation="request deposit",
        )

    async def review_deposit(
        self, request_id: int, decision: ReviewDecision | str
    ) -> RechargeRequest:
        """
        Approve or reject pending recharge request.

        Raises:
            ValidationError: Invalid decision
            NotFoundError: Request missing
            ConflictError: Request already processed
        """
        require_id(request_id, "request_id")
        decision = require_choice(decision, ReviewDecision, "decision")
        now = self.clock()

        return await self.runner.run(
            lambda session: RechargeRequestReviewer(session).review(
                request_id, decision, now
            ),
            operation="review deposit",
        )

    async def get_pending_requests(
        self, limit: int | None = None
    ) -> list[RechargeRequest]:
        async with self.session_maker() as session:
            return await RechargeRequestRepository(session).find_pending(limit)
