"""
Recharge request reviewer.

Approval credits the account in the same transaction as the status
change; rejection only changes status.
"""

from datetime import datetime

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import RequestStatus, ReviewDecision
from app.models.recharge_request import RechargeRequest
from app.repositories.recharge_request_repository import (
    RechargeRequestRepository,
)
from app.services.ledger.balance_manager import BalanceManager
from app.utils.exceptions import ConflictError, NotFoundError


class RechargeRequestReviewer:
    """Reviews pending recharge requests."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.request_repo = RechargeRequestRepository(session)
        self.balance_manager = BalanceManager(session)

    async def review(
        self,
        request_id: int,
        decision: ReviewDecision,
        processed_at: datetime,
    ) -> RechargeRequest:
        """
        Approve or reject pending recharge request.

        Args:
            request_id: Recharge request ID
            decision: Review decision
            processed_at: Time of review

        Returns:
            Reviewed request

        Raises:
            NotFoundError: Request or its account missing
            ConflictError: Request already processed
        """
        request = await self.request_repo.get_by_id(request_id)
        if request is None:
            raise NotFoundError(f"Recharge request {request_id} not found")

        moved = await self.request_repo.transition(
            request_id,
            RequestStatus.PENDING.value,
            status=decision.value,
            processed_at=processed_at,
        )
        if not moved:
            raise ConflictError(
                f"Recharge request {request_id} already processed"
            )

        if decision is ReviewDecision.APPROVED:
            balance = await self.balance_manager.credit(
                request.account_id, request.amount
            )
            logger.bind(
                request_id=request_id,
                account_id=request.account_id,
                amount=str(request.amount),
                balance_after=str(balance),
            ).info(
                f"Recharge request {request_id} approved, "
                f"{request.amount} credited to account {request.account_id}"
            )
        else:
            logger.bind(request_id=request_id).info(
                f"Recharge request {request_id} rejected"
            )

        return await self.request_repo.get_for_update(request_id)
