"""
Withdrawal request handling module.

Creates withdrawal requests, reserving the amount from the balance in
the same transaction.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import RequestStatus
from app.models.withdrawal import Withdrawal
from app.repositories.withdrawal_repository import WithdrawalRepository
from app.services.ledger.balance_manager import BalanceManager
from app.services.withdrawal.withdrawal_validator import ValidatedWithdrawal


class WithdrawalRequestHandler:
    """Handles withdrawal request creation."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize withdrawal request handler.

        Args:
            session: Database session inside an open transaction
        """
        self.session = session
        self.withdrawal_repo = WithdrawalRepository(session)
        self.balance_manager = BalanceManager(session)

    async def create_request(self, request: ValidatedWithdrawal) -> Withdrawal:
        """
        Reserve funds and record pending withdrawal.

        The balance debit runs first; if it fails no withdrawal row is
        written.

        Args:
            request: Validated request

        Returns:
            Pending withdrawal

        Raises:
            InsufficientFundsError: Balance lower than amount
            NotFoundError: Account missing
        """
        balance = await self.balance_manager.debit(
            request.account_id, request.amount
        )
        withdrawal = await self.withdrawal_repo.create(
            account_id=request.account_id,
            amount=request.amount,
            payment_method=request.payment_method.value,
            payment_details=request.payment_details,
            status=RequestStatus.PENDING.value,
        )

        logger.bind(
            withdrawal_id=withdrawal.id,
            account_id=request.account_id,
            amount=str(request.amount),
            balance_after=str(balance),
        ).info("Withdrawal requested, amount reserved")
        return withdrawal
