"""
Wallet history service.

Read-only audit view of an account's money movements:
- Approved deposits (credit)
- Approved withdrawals (debit)
- Investments made (debit)
- Credited earnings by source (credit)

Entries are merged newest first and paginated.
"""

from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from decimal import Decimal

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import (
    EarningSource,
    EarningStatus,
    RequestStatus,
    WalletEntryType,
)
from app.repositories.earning_repository import EarningRepository
from app.repositories.investment_repository import InvestmentRepository
from app.repositories.recharge_request_repository import (
    RechargeRequestRepository,
)
from app.repositories.withdrawal_repository import WithdrawalRepository
from app.utils.datetime_utils import ensure_utc
from app.utils.exceptions import TransactionFailure
from app.validators import require_choice, require_id

# Earning source shown under each entry type
EARNING_ENTRY_TYPES = {
    EarningSource.INVESTMENT: WalletEntryType.INVESTMENT_RETURN,
    EarningSource.REFERRAL: WalletEntryType.REFERRAL_COMMISSION,
    EarningSource.TASK: WalletEntryType.TASK_REWARD,
    EarningSource.OTHER: WalletEntryType.OTHER_EARNING,
}


@dataclass(frozen=True)
class WalletHistoryEntry:
    """One signed movement; debits carry a negative amount."""

    id: int
    date: datetime
    type: WalletEntryType
    description: str
    amount: Decimal
    status: str = "completed"


@dataclass(frozen=True)
class WalletHistoryPage:
    entries: list[WalletHistoryEntry]
    page: int
    per_page: int
    total_count: int
    total_pages: int
    has_prev: bool
    has_next: bool


def _lower_bound(value: date | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    return datetime.combine(value, time.min, tzinfo=UTC)


def _upper_bound(value: date | datetime | None) -> datetime | None:
    # A bare date covers the whole day
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    return datetime.combine(value, time.max, tzinfo=UTC)


class WalletHistoryService:
    """Builds the combined wallet history of an account."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.recharge_repo = RechargeRequestRepository(session)
        self.withdrawal_repo = WithdrawalRepository(session)
        self.investment_repo = InvestmentRepository(session)
        self.earning_repo = EarningRepository(session)

    async def get_history(
        self,
        account_id: int,
        entry_type: WalletEntryType | str | None = None,
        start_date: date | datetime | None = None,
        end_date: date | datetime | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> WalletHistoryPage:
        """
        Get wallet history page.

        Deposits and withdrawals are dated by their review time,
        investments and earnings by creation time.

        Args:
            account_id: Account ID
            entry_type: Only entries of this type
            start_date: Entries at or after this time
            end_date: Entries at or before this time (a date includes
                the whole day)
            page: Page number (1-based)
            per_page: Entries per page

        Returns:
            WalletHistoryPage

        Raises:
            ValidationError: Unknown entry type or bad pagination
            TransactionFailure: Query failed
        """
        require_id(account_id, "account_id")
        page = require_id(page, "page")
        per_page = require_id(per_page, "per_page")
        types = (
            [require_choice(entry_type, WalletEntryType, "type")]
            if entry_type is not None
            else list(WalletEntryType)
        )
        since = _lower_bound(start_date)
        until = _upper_bound(end_date)

        try:
            entries = await self._collect(account_id, types, since, until)
        except SQLAlchemyError as e:
            logger.opt(exception=e).error(
                f"Failed to build wallet history for account {account_id}: {e}"
            )
            raise TransactionFailure(f"Wallet history failed: {e}") from e

        entries.sort(key=lambda entry: entry.date, reverse=True)

        total_count = len(entries)
        total_pages = (
            (total_count + per_page - 1) // per_page if total_count > 0 else 1
        )
        offset = (page - 1) * per_page

        return WalletHistoryPage(
            entries=entries[offset:offset + per_page],
            page=page,
            per_page=per_page,
            total_count=total_count,
            total_pages=total_pages,
            has_prev=page > 1,
            has_next=page < total_pages,
        )

    async def _collect(
        self,
        account_id: int,
        types: list[WalletEntryType],
        since: datetime | None,
        until: datetime | None,
    ) -> list[WalletHistoryEntry]:
        entries: list[WalletHistoryEntry] = []

        if WalletEntryType.DEPOSIT in types:
            deposits = await self.recharge_repo.find_processed(
                account_id, RequestStatus.APPROVED, since, until
            )
            entries.extend(
                WalletHistoryEntry(
                    id=d.id,
                    date=ensure_utc(d.processed_at),
                    type=WalletEntryType.DEPOSIT,
                    description="Wallet deposit approved",
                    amount=d.amount,
                )
                for d in deposits
            )

        if WalletEntryType.WITHDRAWAL in types:
            withdrawals = await self.withdrawal_repo.find_processed(
                account_id, RequestStatus.APPROVED, since, until
            )
            entries.extend(
                WalletHistoryEntry(
                    id=w.id,
                    date=ensure_utc(w.processed_at),
                    type=WalletEntryType.WITHDRAWAL,
                    description=f"Withdrawal via {w.payment_method}",
                    amount=-abs(w.amount),
                )
                for w in withdrawals
            )

        sources = [
            source
            for source, entry_type in EARNING_ENTRY_TYPES.items()
            if entry_type in types
        ]
        if sources:
            earnings = await self.earning_repo.find_by_sources(
                account_id, EarningStatus.CREDITED, sources, since, until
            )
            entries.extend(
                WalletHistoryEntry(
                    id=e.id,
                    date=ensure_utc(e.created_at),
                    type=EARNING_ENTRY_TYPES[EarningSource(e.source)],
                    description=e.description
                    or f"{e.source.capitalize()} earning",
                    amount=e.amount,
                )
                for e in earnings
            )

        if WalletEntryType.INVESTMENT_MADE in types:
            investments = await self.investment_repo.find_with_product_name(
                account_id, since, until
            )
            entries.extend(
                WalletHistoryEntry(
                    id=investment.id,
                    date=ensure_utc(investment.created_at),
                    type=WalletEntryType.INVESTMENT_MADE,
                    description=f"Investment in {product_name or 'product'}",
                    amount=-abs(investment.amount_invested),
                )
                for investment, product_name in investments
            )

        return entries

