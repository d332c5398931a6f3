"""
Integration tests for the withdrawal state machine.

Tests cover:
- Reservation on request (balance debited immediately)
- Approval keeps the reservation, rejection refunds it
- A processed withdrawal cannot be reviewed again
- Concurrent requests never overdraw the balance
"""

import asyncio
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from app.models import PaymentMethod, RequestStatus, ReviewDecision, Withdrawal
from app.services.withdrawal_service import WithdrawalService
from app.utils.exceptions import (
    ConflictError,
    InsufficientFundsError,
    NotFoundError,
    TransactionFailure,
    ValidationError,
)

DETAILS = "03001234567 / Ali Raza"


async def _withdrawal_count(session_maker) -> int:
    async with session_maker() as session:
        result = await session.execute(select(func.count()).select_from(Withdrawal))
        return result.scalar()


class TestRequestWithdrawal:
    """Requesting a withdrawal reserves the amount."""

    @pytest.mark.asyncio
    async def test_insufficient_funds_writes_nothing(
        self, session_maker, make_account, balance_of
    ):
        account_id = await make_account(balance="50")
        service = WithdrawalService(session_maker)

        with pytest.raises(InsufficientFundsError):
            await service.request_withdrawal(
                account_id, "80", PaymentMethod.EASYPAISA, DETAILS
            )

        assert await balance_of(account_id) == Decimal("50")
        assert await _withdrawal_count(session_maker) == 0

    @pytest.mark.asyncio
    async def test_request_reserves_amount(
        self, session_maker, make_account, balance_of
    ):
        account_id = await make_account(balance="500")
        service = WithdrawalService(session_maker)

        withdrawal = await service.request_withdrawal(
            account_id, "100", "JazzCash", DETAILS
        )

        assert withdrawal.status == RequestStatus.PENDING.value
        assert withdrawal.payment_method == PaymentMethod.JAZZCASH.value
        assert withdrawal.amount == Decimal("100")
        assert withdrawal.processed_at is None
        assert await balance_of(account_id) == Decimal("400")

        pending = await service.get_pending_withdrawals()
        assert [w.id for w in pending] == [withdrawal.id]

    @pytest.mark.asyncio
    async def test_exact_balance_can_be_withdrawn(
        self, session_maker, make_account, balance_of
    ):
        account_id = await make_account(balance="75.5")
        service = WithdrawalService(session_maker)

        await service.request_withdrawal(account_id, "75.5", "bank", DETAILS)

        assert await balance_of(account_id) == 0

    @pytest.mark.asyncio
    async def test_unknown_account(self, session_maker):
        service = WithdrawalService(session_maker)

        with pytest.raises(NotFoundError):
            await service.request_withdrawal(999, "10", "bank", DETAILS)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "amount,method,details",
        [
            ("0", "bank", DETAILS),
            ("-5", "bank", DETAILS),
            ("abc", "bank", DETAILS),
            ("10", "paypal", DETAILS),
            ("10", "bank", "   "),
        ],
    )
    async def test_invalid_input(
        self, session_maker, make_account, balance_of, amount, method, details
    ):
        account_id = await make_account(balance="100")
        service = WithdrawalService(session_maker)

        with pytest.raises(ValidationError):
            await service.request_withdrawal(account_id, amount, method, details)

        assert await balance_of(account_id) == Decimal("100")
        assert await _withdrawal_count(session_maker) == 0

    @pytest.mark.asyncio
    async def test_below_configured_minimum(
        self, session_maker, make_account, set_setting, balance_of
    ):
        account_id = await make_account(balance="100")
        await set_setting("minimum_withdrawal", "25")
        service = WithdrawalService(session_maker)

        with pytest.raises(ValidationError, match="Minimum withdrawal"):
            await service.request_withdrawal(account_id, "20", "bank", DETAILS)

        await service.request_withdrawal(account_id, "25", "bank", DETAILS)
        assert await balance_of(account_id) == Decimal("75")


class TestReviewWithdrawal:
    """Pending withdrawals move to approved or rejected exactly once."""

    @pytest.mark.asyncio
    async def test_reject_refunds(self, session_maker, make_account, balance_of):
        account_id = await make_account(balance="500")
        service = WithdrawalService(session_maker)
        withdrawal = await service.request_withdrawal(
            account_id, "100", "easypaisa", DETAILS
        )

        reviewed = await service.review_withdrawal(
            withdrawal.id, ReviewDecision.REJECTED
        )

        assert reviewed.status == RequestStatus.REJECTED.value
        assert reviewed.processed_at is not None
        assert await balance_of(account_id) == Decimal("500")

    @pytest.mark.asyncio
    async def test_approve_keeps_reservation(
        self, session_maker, make_account, balance_of
    ):
        account_id = await make_account(balance="500")
        service = WithdrawalService(session_maker)
        withdrawal = await service.request_withdrawal(
            account_id, "100", "bank", DETAILS
        )

        reviewed = await service.review_withdrawal(withdrawal.id, "approved")

        assert reviewed.status == RequestStatus.APPROVED.value
        assert reviewed.processed_at is not None
        assert await balance_of(account_id) == Decimal("400")
        assert await service.get_pending_withdrawals() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "first,second",
        [
            (ReviewDecision.APPROVED, ReviewDecision.REJECTED),
            (ReviewDecision.REJECTED, ReviewDecision.REJECTED),
            (ReviewDecision.REJECTED, ReviewDecision.APPROVED),
        ],
    )
    async def test_second_review_conflicts(
        self, session_maker, make_account, balance_of, first, second
    ):
        account_id = await make_account(balance="500")
        service = WithdrawalService(session_maker)
        withdrawal = await service.request_withdrawal(
            account_id, "100", "bank", DETAILS
        )
        await service.review_withdrawal(withdrawal.id, first)
        balance_after_first = await balance_of(account_id)

        with pytest.raises(ConflictError):
            await service.review_withdrawal(withdrawal.id, second)

        assert await balance_of(account_id) == balance_after_first
        history = await service.get_account_withdrawals(account_id)
        assert history[0].status == first.value

    @pytest.mark.asyncio
    async def test_unknown_withdrawal(self, session_maker):
        service = WithdrawalService(session_maker)

        with pytest.raises(NotFoundError):
            await service.review_withdrawal(12345, "approved")

    @pytest.mark.asyncio
    async def test_invalid_decision(self, session_maker, make_account):
        account_id = await make_account(balance="500")
        service = WithdrawalService(session_maker)
        withdrawal = await service.request_withdrawal(
            account_id, "100", "bank", DETAILS
        )

        with pytest.raises(ValidationError):
            await service.review_withdrawal(withdrawal.id, "pending")

    @pytest.mark.asyncio
    async def test_history_filtered_by_status(self, session_maker, make_account):
        account_id = await make_account(balance="500")
        service = WithdrawalService(session_maker)
        first = await service.request_withdrawal(account_id, "10", "bank", DETAILS)
        await service.request_withdrawal(account_id, "20", "bank", DETAILS)
        await service.review_withdrawal(first.id, "approved")

        approved = await service.get_account_withdrawals(
            account_id, RequestStatus.APPROVED
        )
        pending = await service.get_account_withdrawals(
            account_id, RequestStatus.PENDING
        )

        assert [w.amount for w in approved] == [Decimal("10")]
        assert [w.amount for w in pending] == [Decimal("20")]


class TestConcurrentWithdrawals:
    """Concurrent requests cannot overdraw."""

    @pytest.mark.asyncio
    async def test_only_one_of_two_succeeds(
        self, session_maker, make_account, balance_of
    ):
        account_id = await make_account(balance="100")
        service = WithdrawalService(session_maker)

        results = await asyncio.gather(
            service.request_withdrawal(account_id, "70", "bank", DETAILS),
            service.request_withdrawal(account_id, "70", "bank", DETAILS),
            return_exceptions=True,
        )

        succeeded = [r for r in results if isinstance(r, Withdrawal)]
        failed = [r for r in results if isinstance(r, Exception)]
        assert len(succeeded) == 1
        assert len(failed) == 1
        assert isinstance(failed[0], (InsufficientFundsError, TransactionFailure))
        assert await balance_of(account_id) == Decimal("30")
        assert await _withdrawal_count(session_maker) == 1
