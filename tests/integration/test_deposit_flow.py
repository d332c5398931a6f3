"""
Integration tests for recharge (deposit) requests.
"""

from decimal import Decimal

import pytest

from app.models import RequestStatus, ReviewDecision
from app.services.deposit import DepositService
from app.utils.exceptions import ConflictError, NotFoundError, ValidationError

PROOF = "uploads/receipts/2026-10-19-0001.jpg"


class TestDepositFlow:
    """Recharge requests credit the balance only when approved."""

    @pytest.mark.asyncio
    async def test_request_does_not_change_balance(
        self, session_maker, make_account, balance_of
    ):
        account_id = await make_account(balance="10")
        service = DepositService(session_maker)

        request = await service.request_deposit(account_id, "250", PROOF)

        assert request.status == RequestStatus.PENDING.value
        assert request.proof == PROOF
        assert await balance_of(account_id) == Decimal("10")
        assert [r.id for r in await service.get_pending_requests()] == [request.id]

    @pytest.mark.asyncio
    async def test_approve_credits_account(
        self, session_maker, make_account, balance_of
    ):
        account_id = await make_account(balance="10")
        service = DepositService(session_maker)
        request = await service.request_deposit(account_id, "250", PROOF)

        reviewed = await service.review_deposit(request.id, ReviewDecision.APPROVED)

        assert reviewed.status == RequestStatus.APPROVED.value
        assert reviewed.processed_at is not None
        assert await balance_of(account_id) == Decimal("260")
        assert await service.get_pending_requests() == []

    @pytest.mark.asyncio
    async def test_reject_leaves_balance(
        self, session_maker, make_account, balance_of
    ):
        account_id = await make_account(balance="10")
        service = DepositService(session_maker)
        request = await service.request_deposit(account_id, "250", PROOF)

        reviewed = await service.review_deposit(request.id, "rejected")

        assert reviewed.status == RequestStatus.REJECTED.value
        assert await balance_of(account_id) == Decimal("10")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "first,second,expected_balance",
        [
            (ReviewDecision.APPROVED, ReviewDecision.APPROVED, "40"),
            (ReviewDecision.APPROVED, ReviewDecision.REJECTED, "40"),
            (ReviewDecision.REJECTED, ReviewDecision.APPROVED, "0"),
            (ReviewDecision.REJECTED, ReviewDecision.REJECTED, "0"),
        ],
    )
    async def test_second_review_conflicts(
        self, session_maker, make_account, balance_of, first, second, expected_balance
    ):
        account_id = await make_account()
        service = DepositService(session_maker)
        request = await service.request_deposit(account_id, "40", PROOF)
        await service.review_deposit(request.id, first)

        with pytest.raises(ConflictError):
            await service.review_deposit(request.id, second)

        assert await balance_of(account_id) == Decimal(expected_balance)
        assert await service.get_pending_requests() == []

    @pytest.mark.asyncio
    async def test_unknown_account(self, session_maker):
        service = DepositService(session_maker)

        with pytest.raises(NotFoundError):
            await service.request_deposit(404, "40", PROOF)

    @pytest.mark.asyncio
    async def test_unknown_request(self, session_maker):
        service = DepositService(session_maker)

        with pytest.raises(NotFoundError):
            await service.review_deposit(404, "approved")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "amount,proof",
        [("0", PROOF), ("-1", PROOF), ("", PROOF), ("40", ""), ("40", None)],
    )
    async def test_invalid_input(self, session_maker, make_account, amount, proof):
        account_id = await make_account()
        service = DepositService(session_maker)

        with pytest.raises(ValidationError):
            await service.request_deposit(account_id, amount, proof)

        assert await service.get_pending_requests() == []
