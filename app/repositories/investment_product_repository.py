"""
Investment product repository.

Data access layer for InvestmentProduct model.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import ProductStatus
from app.models.investment_product import InvestmentProduct
from app.repositories.base import BaseRepository


class InvestmentProductRepository(BaseRepository[InvestmentProduct]):
    """Investment product repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize investment product repository."""
        super().__init__(InvestmentProduct, session)

    async def find_active(self) -> list[InvestmentProduct]:
        """Get products open for new investments."""
        return await self.find_by(status=ProductStatus.ACTIVE.value)
