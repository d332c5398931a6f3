"""
Investment product model.

Configuration of a product accounts can invest in. Read-only for the engine.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    DECIMAL,
    CheckConstraint,
    DateTime,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.enums import ProductStatus, ReturnPeriodUnit
from app.utils.datetime_utils import utc_now


class InvestmentProduct(Base):
    """Investment product - return rate and period configuration."""

    __tablename__ = "investment_products"
    __table_args__ = (
        CheckConstraint(
            'minimum_amount >= 0',
            name='check_product_minimum_amount_non_negative'
        ),
        CheckConstraint(
            'return_rate >= 0', name='check_product_return_rate_non_negative'
        ),
        CheckConstraint(
            'return_period >= 1', name='check_product_return_period_positive'
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)

    minimum_amount: Mapped[Decimal] = mapped_column(
        DECIMAL(18, 8), nullable=False
    )
    # Percent of the invested amount paid per period
    return_rate: Mapped[Decimal] = mapped_column(
        DECIMAL(18, 8), nullable=False
    )
    return_period: Mapped[int] = mapped_column(Integer, nullable=False)
    return_period_unit: Mapped[str] = mapped_column(
        String(10), default=ReturnPeriodUnit.DAY.value, nullable=False
    )

    status: Mapped[str] = mapped_column(
        String(20), default=ProductStatus.ACTIVE.value, nullable=False, index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    @property
    def is_active(self) -> bool:
        return self.status == ProductStatus.ACTIVE.value
