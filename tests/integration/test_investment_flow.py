"""
Integration tests for investment creation and referral commission.

Investment and commission commit in separate transactions; a failed
commission never rolls back the investment.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy import select

from app.models import Earning, EarningSource, Investment, ProductStatus, ReferralTier
from app.services.investment import InvestmentReturnProcessor, InvestmentService
from app.utils.datetime_utils import ensure_utc
from app.utils.exceptions import (
    AccessDeniedError,
    ConflictError,
    InsufficientFundsError,
    NotFoundError,
    ValidationError,
)


async def _earnings(session_maker, account_id: int) -> list[Earning]:
    async with session_maker() as session:
        result = await session.execute(
            select(Earning).where(Earning.account_id == account_id)
        )
        return list(result.scalars().all())


async def _investment_count(session_maker) -> int:
    async with session_maker() as session:
        result = await session.execute(select(Investment))
        return len(result.scalars().all())


class TestCreateInvestment:
    """Investment creation debits balance and records the position."""

    @pytest.mark.asyncio
    async def test_invest_then_daily_return(
        self, session_maker, make_account, make_product, balance_of
    ):
        account_id = await make_account(balance="1000")
        product_id = await make_product(return_rate="5", return_period=1)
        service = InvestmentService(session_maker)

        created = await service.create_investment(account_id, product_id, "200")

        assert created.balance == Decimal("800")
        assert await balance_of(account_id) == Decimal("800")
        assert created.investment.amount_invested == Decimal("200")
        assert created.investment.current_value == Decimal("200")
        assert created.commission == 0

        processor = InvestmentReturnProcessor(session_maker)
        one_day_later = ensure_utc(created.investment.last_return_date) + timedelta(
            days=1, seconds=1
        )
        stats = await processor.run_scheduled_return_pass(now=one_day_later)

        assert stats.processed == 1
        assert stats.total_amount_distributed == Decimal("10")
        assert await balance_of(account_id) == Decimal("810")

    @pytest.mark.asyncio
    async def test_insufficient_funds_creates_nothing(
        self, session_maker, make_account, make_product, balance_of
    ):
        account_id = await make_account(balance="50")
        product_id = await make_product()
        service = InvestmentService(session_maker)

        with pytest.raises(InsufficientFundsError):
            await service.create_investment(account_id, product_id, Decimal("80"))

        assert await balance_of(account_id) == Decimal("50")
        assert await _investment_count(session_maker) == 0

    @pytest.mark.asyncio
    async def test_inactive_product_rejected(
        self, session_maker, make_account, make_product
    ):
        account_id = await make_account(balance="500")
        product_id = await make_product(status=ProductStatus.INACTIVE)

        with pytest.raises(ValidationError):
            await InvestmentService(session_maker).create_investment(
                account_id, product_id, "100"
            )

    @pytest.mark.asyncio
    async def test_below_product_minimum_rejected(
        self, session_maker, make_account, make_product, balance_of
    ):
        account_id = await make_account(balance="500")
        product_id = await make_product(minimum_amount="100")

        with pytest.raises(ValidationError, match="Minimum"):
            await InvestmentService(session_maker).create_investment(
                account_id, product_id, "99.99"
            )
        assert await balance_of(account_id) == Decimal("500")

    @pytest.mark.asyncio
    async def test_unknown_product_and_account(
        self, session_maker, make_account, make_product
    ):
        account_id = await make_account(balance="500")
        product_id = await make_product()
        service = InvestmentService(session_maker)

        with pytest.raises(NotFoundError):
            await service.create_investment(account_id, 9999, "100")
        with pytest.raises(NotFoundError):
            await service.create_investment(9999, product_id, "100")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", ["abc", "-5", 0, None])
    async def test_bad_amount_rejected(
        self, session_maker, make_account, make_product, amount
    ):
        account_id = await make_account(balance="500")
        product_id = await make_product()

        with pytest.raises(ValidationError):
            await InvestmentService(session_maker).create_investment(
                account_id, product_id, amount
            )


class TestReferralCommission:
    """Commission credited to the investor's referrer."""

    @pytest.mark.asyncio
    async def test_gold_referrer_gets_twenty_percent(
        self, session_maker, make_account, make_product, balance_of
    ):
        referrer_id = await make_account(
            balance="0", referral_tier=ReferralTier.GOLD
        )
        investor_id = await make_account(balance="100", referred_by_id=referrer_id)
        product_id = await make_product()

        created = await InvestmentService(session_maker).create_investment(
            investor_id, product_id, Decimal("100")
        )

        assert created.commission == Decimal("20")
        assert await balance_of(referrer_id) == Decimal("20")
        assert await balance_of(investor_id) == Decimal("0")

        earnings = await _earnings(session_maker, referrer_id)
        assert len(earnings) == 1
        assert earnings[0].source == EarningSource.REFERRAL.value
        assert earnings[0].amount == Decimal("20")
        assert earnings[0].reference_id == created.investment.id

    @pytest.mark.asyncio
    async def test_configured_rates_used(
        self, session_maker, make_account, make_product, balance_of, set_setting
    ):
        await set_setting("referral_bonus", "4")
        await set_setting("referral_level_bonus_increment", "1")
        referrer_id = await make_account(referral_tier=ReferralTier.SILVER)
        investor_id = await make_account(balance="200", referred_by_id=referrer_id)
        product_id = await make_product()

        created = await InvestmentService(session_maker).create_investment(
            investor_id, product_id, "200"
        )

        assert created.commission == Decimal("10")
        assert await balance_of(referrer_id) == Decimal("10")

    @pytest.mark.asyncio
    async def test_no_referrer_no_commission(
        self, session_maker, make_account, make_product
    ):
        investor_id = await make_account(balance="100")
        product_id = await make_product()

        created = await InvestmentService(session_maker).create_investment(
            investor_id, product_id, "100"
        )

        assert created.commission == 0
        assert await _earnings(session_maker, investor_id) == []

    @pytest.mark.asyncio
    async def test_commission_failure_keeps_investment(
        self, session_maker, make_account, make_product, balance_of, set_setting
    ):
        await set_setting("referral_bonus", "not-a-number")
        referrer_id = await make_account(referral_tier=ReferralTier.GOLD)
        investor_id = await make_account(balance="100", referred_by_id=referrer_id)
        product_id = await make_product()
        service = InvestmentService(session_maker)

        created = await service.create_investment(investor_id, product_id, "100")

        assert created.commission == 0
        assert created.investment.id is not None
        assert await balance_of(investor_id) == Decimal("0")
        assert await balance_of(referrer_id) == Decimal("0")
        assert await _investment_count(session_maker) == 1

        # Fixing the setting lets the commission be retried exactly once
        await set_setting("referral_bonus", "10")
        assert await service.retry_referral_commission(
            created.investment.id
        ) == Decimal("20")
        assert await service.retry_referral_commission(created.investment.id) == 0

        assert await balance_of(referrer_id) == Decimal("20")
        assert len(await _earnings(session_maker, referrer_id)) == 1

    @pytest.mark.asyncio
    async def test_commission_error_with_braces_keeps_investment(
        self, session_maker, make_account, make_product, balance_of, set_setting
    ):
        await set_setting("referral_bonus", "{10}")
        referrer_id = await make_account(referral_tier=ReferralTier.GOLD)
        investor_id = await make_account(balance="100", referred_by_id=referrer_id)
        product_id = await make_product()

        created = await InvestmentService(session_maker).create_investment(
            investor_id, product_id, "100"
        )

        assert created.commission == 0
        assert await balance_of(investor_id) == Decimal("0")
        assert await balance_of(referrer_id) == Decimal("0")
        assert await _investment_count(session_maker) == 1

    @pytest.mark.asyncio
    async def test_money_is_conserved(
        self, session_maker, make_account, make_product, balance_of
    ):
        referrer_id = await make_account(
            balance="5", referral_tier=ReferralTier.PLATINUM
        )
        investor_id = await make_account(balance="300", referred_by_id=referrer_id)
        product_id = await make_product()

        created = await InvestmentService(session_maker).create_investment(
            investor_id, product_id, "300"
        )

        assert await balance_of(investor_id) == Decimal("0")
        assert await balance_of(referrer_id) == Decimal("5") + created.commission
        assert created.commission == Decimal("90")


class TestWithdrawPrincipal:
    """Closing an investment returns its current value."""

    @pytest.mark.asyncio
    async def test_owner_withdraws_current_value(
        self, session_maker, make_account, make_product, balance_of
    ):
        account_id = await make_account(balance="500")
        product_id = await make_product()
        service = InvestmentService(session_maker)
        created = await service.create_investment(account_id, product_id, "300")

        amount = await service.withdraw_investment_principal(
            created.investment.id, account_id
        )

        assert amount == Decimal("300")
        assert await balance_of(account_id) == Decimal("500")

        withdrawn = await service.get_account_investments(account_id)
        assert withdrawn[0].status == "withdrawn"
        assert withdrawn[0].withdrawn_at is not None

    @pytest.mark.asyncio
    async def test_second_withdrawal_conflicts(
        self, session_maker, make_account, make_product, balance_of
    ):
        account_id = await make_account(balance="100")
        product_id = await make_product()
        service = InvestmentService(session_maker)
        created = await service.create_investment(account_id, product_id, "100")
        await service.withdraw_investment_principal(created.investment.id, account_id)

        with pytest.raises(ConflictError):
            await service.withdraw_investment_principal(
                created.investment.id, account_id
            )
        assert await balance_of(account_id) == Decimal("100")

    @pytest.mark.asyncio
    async def test_other_account_denied(
        self, session_maker, make_account, make_product, balance_of
    ):
        owner_id = await make_account(balance="100")
        other_id = await make_account(balance="0")
        product_id = await make_product()
        service = InvestmentService(session_maker)
        created = await service.create_investment(owner_id, product_id, "100")

        with pytest.raises(AccessDeniedError):
            await service.withdraw_investment_principal(created.investment.id, other_id)

        assert await balance_of(other_id) == Decimal("0")
        assert await balance_of(owner_id) == Decimal("0")

    @pytest.mark.asyncio
    async def test_unknown_investment(self, session_maker, make_account):
        account_id = await make_account()
        with pytest.raises(NotFoundError):
            await InvestmentService(session_maker).withdraw_investment_principal(
                12345, account_id
            )

    @pytest.mark.asyncio
    async def test_withdrawn_investment_earns_nothing(
        self, session_maker, make_account, make_product, balance_of
    ):
        account_id = await make_account(balance="100")
        product_id = await make_product()
        service = InvestmentService(session_maker)
        created = await service.create_investment(account_id, product_id, "100")
        await service.withdraw_investment_principal(created.investment.id, account_id)

        stats = await InvestmentReturnProcessor(session_maker).run_scheduled_return_pass(
            now=ensure_utc(created.investment.last_return_date) + timedelta(days=5)
        )

        assert stats.found == 0
        assert await balance_of(account_id) == Decimal("100")
