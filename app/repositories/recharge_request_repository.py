"""
Recharge request repository.

Data access layer for RechargeRequest model.
"""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import RequestStatus
from app.models.recharge_request import RechargeRequest
from app.repositories.base import BaseRepository


class RechargeRequestRepository(BaseRepository[RechargeRequest]):
    """Recharge request repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize recharge request repository."""
        super().__init__(RechargeRequest, session)

    async def find_pending(
        self, limit: int | None = None
    ) -> list[RechargeRequest]:
        """Get pending recharge requests, oldest first."""
        return await self.find_by(
            limit=limit, status=RequestStatus.PENDING.value
        )

    async def find_processed(
        self,
        account_id: int,
        status: RequestStatus,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> list[RechargeRequest]:
        """
        Get reviewed requests of an account, newest review first.

        Args:
            account_id: Account ID
            status: Review outcome
            since: Reviewed at or after this time
            until: Reviewed at or before this time

        Returns:
            List of recharge requests
        """
        stmt = select(RechargeRequest).where(
            RechargeRequest.account_id == account_id,
            RechargeRequest.status == status.value,
        )
        if since is not None:
            stmt = stmt.where(RechargeRequest.processed_at >= since)
        if until is not None:
            stmt = stmt.where(RechargeRequest.processed_at <= until)

        result = await self.session.execute(
            stmt.order_by(RechargeRequest.processed_at.desc())
        )
        return list(result.scalars().all())
