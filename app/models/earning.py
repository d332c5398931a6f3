"""
Earning model.

Append-only record explaining why a balance increased.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    DECIMAL,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.enums import EarningStatus
from app.utils.datetime_utils import utc_now


class Earning(Base):
    """Earning model - credit events from referrals, investments and tasks."""

    __tablename__ = "earnings"
    __table_args__ = (
        Index('idx_earning_account_source', 'account_id', 'source'),
        Index('idx_earning_reference', 'reference_type', 'reference_id'),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(DECIMAL(18, 8), nullable=False)
    source: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=EarningStatus.PENDING.value, nullable=False
    )
    description: Mapped[str] = mapped_column(
        String(500), default="", nullable=False
    )

    # Weak reference to the originating entity (lookup only)
    reference_type: Mapped[str | None] = mapped_column(
        String(50), nullable=True
    )
    reference_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # One credit per key; guards against double crediting on retry
    idempotency_key: Mapped[str | None] = mapped_column(
        String(128), nullable=True, unique=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
