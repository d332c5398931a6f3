"""
Withdrawal lifecycle handling module.

Handles approval and rejection of pending withdrawals.
"""

from datetime import datetime

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import RequestStatus, ReviewDecision
from app.models.withdrawal import Withdrawal
from app.repositories.withdrawal_repository import WithdrawalRepository
from app.services.ledger.balance_manager import BalanceManager
from app.utils.exceptions import ConflictError, NotFoundError


class WithdrawalLifecycleHandler:
    """Handles withdrawal review transitions."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize withdrawal lifecycle handler.

        Args:
            session: Database session inside an open transaction
        """
        self.session = session
        self.withdrawal_repo = WithdrawalRepository(session)
        self.balance_manager = BalanceManager(session)

    async def review(
        self,
        withdrawal_id: int,
        decision: ReviewDecision,
        processed_at: datetime,
    ) -> Withdrawal:
        """
        Move pending withdrawal to approved or rejected.

        Rejection refunds the reserved amount in the same transaction.

        Args:
            withdrawal_id: Withdrawal ID
            decision: Review decision
            processed_at: Time of review

        Returns:
            Reviewed withdrawal

        Raises:
            NotFoundError: Withdrawal missing
            ConflictError: Withdrawal already processed
        """
        withdrawal = await self.withdrawal_repo.get_by_id(withdrawal_id)
        if withdrawal is None:
            raise NotFoundError(f"Withdrawal {withdrawal_id} not found")

        moved = await self.withdrawal_repo.transition(
            withdrawal_id,
            RequestStatus.PENDING.value,
            status=decision.value,
            processed_at=processed_at,
        )
        if not moved:
            raise ConflictError(
                f"Withdrawal {withdrawal_id} already processed"
            )

        if decision is ReviewDecision.REJECTED:
            await self.balance_manager.credit(
                withdrawal.account_id, withdrawal.amount
            )

        logger.bind(
            withdrawal_id=withdrawal_id,
            account_id=withdrawal.account_id,
            amount=str(withdrawal.amount),
            refunded=decision is ReviewDecision.REJECTED,
        ).info(f"Withdrawal {withdrawal_id} {decision.value}")
        return await self.withdrawal_repo.get_for_update(withdrawal_id)
