"""
Investment service.

Creates investments (with referral commission) and withdraws principal.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.enums import InvestmentStatus
from app.models.investment import Investment
from app.repositories.investment_product_repository import (
    InvestmentProductRepository,
)
from app.repositories.investment_repository import InvestmentRepository
from app.services.ledger.balance_manager import BalanceManager
from app.services.ledger.transaction_runner import TransactionRunner
from app.services.referral.commission_service import ReferralCommissionService
from app.utils.datetime_utils import utc_now
from app.utils.exceptions import (
    AccessDeniedError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from app.validators import require_amount, require_id


@dataclass
class CreatedInvestment:
    """Result of create_investment."""

    investment: Investment
    commission: Decimal
    balance: Decimal


class InvestmentService:
    """
    Investment lifecycle operations.

    Investment creation and referral commission run in two separate
    transactions: the investment commits first, then the commission is
    attempted. A failed commission never undoes the investment.
    """

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize investment service.

        Args:
            session_maker: Session factory; each operation opens its own
                transaction
            clock: Source of current time
        """
        self.session_maker = session_maker
        self.runner = TransactionRunner(session_maker)
        self.clock = clock

    async def create_investment(
        self,
        account_id: int,
        product_id: int,
        amount: Any,
    ) -> CreatedInvestment:
        """
        Invest amount from account balance into product.

        Args:
            account_id: Investor account
            product_id: Investment product
            amount: Amount to invest (Decimal, int, float or string)

        Returns:
            CreatedInvestment with the new investment, awarded referral
            commission and investor's balance after the debit

        Raises:
            ValidationError: Bad amount, inactive product or amount below
                product minimum
            NotFoundError: Account or product missing
            InsufficientFundsError: Balance lower than amount
            TransactionFailure: Storage failure
        """
        require_id(account_id, "account_id")
        require_id(product_id, "product_id")
        amount = require_amount(amount)
        now = self.clock()

        async def work(session: AsyncSession) -> tuple[Investment, Decimal]:
            product = await InvestmentProductRepository(session).get_by_id(
                product_id
            )
            if product is None:
                raise NotFoundError(f"Investment product {product_id} not found")
            if not product.is_active:
                raise ValidationError(
                    f"Investment product {product_id} is not active"
                )
            if amount < product.minimum_amount:
                raise ValidationError(
                    f"Minimum investment for this product is "
                    f"{product.minimum_amount}"
                )

            balance = await BalanceManager(session).debit(account_id, amount)
            investment = await InvestmentRepository(session).create(
                account_id=account_id,
                product_id=product_id,
                amount_invested=amount,
                current_value=amount,
                last_return_date=now,
                status=InvestmentStatus.ACTIVE.value,
                created_at=now,
            )
            return investment, balance

        investment, balance = await self.runner.run(
            work, operation="create investment"
        )
        logger.bind(
            investment_id=investment.id,
            account_id=account_id,
            amount=str(amount),
        ).info(
            f"Investment {investment.id} created: account {account_id} "
            f"invested {amount} in product {product_id}"
        )

        commission = await self._award_commission(
            account_id, investment.id, amount
        )
        return CreatedInvestment(
            investment=investment, commission=commission, balance=balance
        )

    async def retry_referral_commission(self, investment_id: int) -> Decimal:
        """
        Re-attempt referral commission for an investment.

        Safe to call repeatedly; commission is credited at most once.

        Args:
            investment_id: Investment ID

        Returns:
            Commission credited by this call

        Raises:
            NotFoundError: Investment missing
            SettingsUnavailableError: Commission settings unreadable
            TransactionFailure: Storage failure
        """

        async def work(session: AsyncSession) -> Decimal:
            investment = await InvestmentRepository(session).get_by_id(
                investment_id
            )
            if investment is None:
                raise NotFoundError(f"Investment {investment_id} not found")
            return await ReferralCommissionService(session).award_commission(
                investment.account_id,
                investment.id,
                investment.amount_invested,
            )

        return await self.runner.run(work, operation="retry referral commission")

    async def withdraw_investment_principal(
        self, investment_id: int, account_id: int
    ) -> Decimal:
        """
        Close investment and credit its current value to the owner.

        Args:
            investment_id: Investment to close
            account_id: Account performing the withdrawal

        Returns:
            Credited amount

        Raises:
            NotFoundError: Investment missing
            AccessDeniedError: Investment belongs to another account
            ConflictError: Investment already withdrawn
        """
        require_id(investment_id, "investment_id")
        require_id(account_id, "account_id")
        now = self.clock()

        async def work(session: AsyncSession) -> Decimal:
            repo = InvestmentRepository(session)
            investment = await repo.get_for_update(investment_id)
            if investment is None:
                raise NotFoundError(f"Investment {investment_id} not found")
            if investment.account_id != account_id:
                raise AccessDeniedError(
                    f"Investment {investment_id} does not belong to "
                    f"account {account_id}"
                )

            withdrawn = await repo.transition(
                investment_id,
                InvestmentStatus.ACTIVE.value,
                status=InvestmentStatus.WITHDRAWN.value,
                withdrawn_at=now,
            )
            if not withdrawn:
                raise ConflictError(
                    f"Investment {investment_id} already withdrawn"
                )

            amount = investment.current_value
            await BalanceManager(session).credit(account_id, amount)
            return amount

        amount = await self.runner.run(work, operation="withdraw investment")
        logger.bind(investment_id=investment_id, amount=str(amount)).info(
            f"Investment {investment_id} withdrawn: {amount} credited to "
            f"account {account_id}"
        )
        return amount

    async def get_account_investments(
        self,
        account_id: int,
        status: InvestmentStatus | None = None,
    ) -> list[Investment]:
        """Get investments owned by account, oldest first."""
        async with self.session_maker() as session:
            return await InvestmentRepository(session).find_by_account(
                account_id, status
            )

    async def _award_commission(
        self, account_id: int, investment_id: int, amount: Decimal
    ) -> Decimal:
        """Best-effort commission; failures are logged and reported as 0."""

        async def work(session: AsyncSession) -> Decimal:
            return await ReferralCommissionService(session).award_commission(
                account_id, investment_id, amount
            )

        try:
            return await self.runner.run(work, operation="referral commission")
        except Exception as e:
            logger.bind(investment_id=investment_id, account_id=account_id).error(
                f"Referral commission for investment {investment_id} failed: "
                f"{type(e).__name__}: {e}"
            )
            return Decimal("0")
