"""
Investment model.

An account's position in an investment product.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    DECIMAL,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.enums import InvestmentStatus
from app.utils.datetime_utils import utc_now


class Investment(Base):
    """Investment model - principal, accrual marker and lifecycle status."""

    __tablename__ = "investments"
    __table_args__ = (
        CheckConstraint(
            'amount_invested > 0', name='check_investment_amount_positive'
        ),
        CheckConstraint(
            'current_value >= 0',
            name='check_investment_current_value_non_negative'
        ),
        Index('idx_investment_status', 'status'),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id: Mapped[int] = mapped_column(
        ForeignKey("investment_products.id"),
        nullable=False,
        index=True,
    )

    amount_invested: Mapped[Decimal] = mapped_column(
        DECIMAL(18, 8), nullable=False
    )
    current_value: Mapped[Decimal] = mapped_column(
        DECIMAL(18, 8), nullable=False
    )

    # Maturity is measured from this point; advanced on every applied return
    last_return_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    status: Mapped[str] = mapped_column(
        String(20), default=InvestmentStatus.ACTIVE.value, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    withdrawn_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    @property
    def is_active(self) -> bool:
        return self.status == InvestmentStatus.ACTIVE.value

    def __repr__(self) -> str:
        return (
            f"<Investment(id={self.id}, account_id={self.account_id}, "
            f"amount={self.amount_invested}, status={self.status})>"
        )
