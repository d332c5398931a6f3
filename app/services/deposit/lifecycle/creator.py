"""
Recharge request creator.

Records a pending deposit request. No balance changes until approval.
"""

from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import RequestStatus
from app.models.recharge_request import RechargeRequest
from app.repositories.account_repository import AccountRepository
from app.repositories.recharge_request_repository import (
    RechargeRequestRepository,
)
from app.utils.exceptions import NotFoundError


class RechargeRequestCreator:
    """Creates recharge requests."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.account_repo = AccountRepository(session)
        self.request_repo = RechargeRequestRepository(session)

    async def create(
        self, account_id: int, amount: Decimal, proof: str
    ) -> RechargeRequest:
        """
        Create pending recharge request.

        Raises:
            NotFoundError: Account missing
        """
        if not await self.account_repo.exists(id=account_id):
            raise NotFoundError(f"Account {account_id} not found")

        request = await self.request_repo.create(
            account_id=account_id,
            amount=amount,
            proof=proof,
            status=RequestStatus.PENDING.value,
        )
        logger.bind(
            request_id=request.id,
            account_id=account_id,
            amount=str(amount),
        ).info("Recharge request created")
        return request
