"""
Account model.

One ledger account per user, holding a single mutable balance.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    DECIMAL,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.enums import ReferralTier
from app.utils.datetime_utils import utc_now


class Account(Base):
    """Account model - user balance and referral position."""

    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint(
            'balance >= 0', name='check_account_balance_non_negative'
        ),
        CheckConstraint(
            'referral_count >= 0',
            name='check_account_referral_count_non_negative'
        ),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    username: Mapped[str | None] = mapped_column(
        String(255), nullable=True, index=True
    )
    email: Mapped[str | None] = mapped_column(
        String(255), nullable=True, unique=True
    )

    balance: Mapped[Decimal] = mapped_column(
        DECIMAL(18, 8), default=Decimal("0"), nullable=False
    )

    # Referral
    referral_tier: Mapped[str] = mapped_column(
        String(20), default=ReferralTier.BRONZE.value, nullable=False
    )
    referral_count: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    referred_by_id: Mapped[int | None] = mapped_column(
        ForeignKey("accounts.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )

    @property
    def tier(self) -> ReferralTier:
        return ReferralTier(self.referral_tier)

    def __repr__(self) -> str:
        return (
            f"<Account(id={self.id}, balance={self.balance}, "
            f"tier={self.referral_tier})>"
        )
