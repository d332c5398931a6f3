"""
Referral commission service.

Credits a referrer when one of their referrals invests.
"""

from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import EarningSource, EarningStatus
from app.repositories.account_repository import AccountRepository
from app.repositories.earning_repository import EarningRepository
from app.services.ledger.balance_manager import BalanceManager
from app.services.referral.commission_calculator import CommissionCalculator


def referral_idempotency_key(investment_id: int) -> str:
    return f"referral:{investment_id}"


class ReferralCommissionService:
    """Awards referral commission inside the caller's transaction."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.account_repo = AccountRepository(session)
        self.earning_repo = EarningRepository(session)
        self.calculator = CommissionCalculator(session)
        self.balance_manager = BalanceManager(session)

    async def award_commission(
        self,
        investor_id: int,
        investment_id: int,
        amount: Decimal,
    ) -> Decimal:
        """
        Credit referrer of investor for an investment.

        At most one commission is ever credited per investment.

        Args:
            investor_id: Account that made the investment
            investment_id: Investment that triggered the commission
            amount: Invested amount

        Returns:
            Credited commission (0 when there is no referrer or it was
            already credited)
        """
        key = referral_idempotency_key(investment_id)
        if await self.earning_repo.exists_by_idempotency_key(key):
            logger.info(
                f"Referral commission for investment {investment_id} "
                f"already credited"
            )
            return Decimal("0")

        referrer_id = await self.account_repo.get_referrer_id(investor_id)
        if referrer_id is None:
            return Decimal("0")

        referrer = await self.account_repo.get_by_id(referrer_id)
        if referrer is None:
            logger.warning(
                f"Referrer {referrer_id} of account {investor_id} not found"
            )
            return Decimal("0")

        rate = await self.calculator.compute_commission_rate(referrer.tier)
        commission = self.calculator.calculate_commission(amount, rate)
        if commission <= 0:
            return Decimal("0")

        await self.balance_manager.credit(referrer_id, commission)
        await self.earning_repo.create(
            account_id=referrer_id,
            amount=commission,
            source=EarningSource.REFERRAL.value,
            status=EarningStatus.CREDITED.value,
            description=(
                f"Referral commission ({rate}%) from investment "
                f"#{investment_id}"
            ),
            reference_type="investment",
            reference_id=investment_id,
            idempotency_key=key,
        )

        logger.bind(
            referrer_id=referrer_id,
            investment_id=investment_id,
            amount=str(commission),
        ).info(
            f"Referral commission {commission} credited to account "
            f"{referrer_id} (tier={referrer.referral_tier}, rate={rate}%)"
        )
        return commission
