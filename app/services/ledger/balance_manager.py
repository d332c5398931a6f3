"""
Balance manager.

Single place where account balances change. Every adjustment is one
conditional UPDATE, so the non-negative balance rule holds under
concurrent requests without read-modify-write races.
"""

from decimal import Decimal

from loguru import logger
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.account import Account
from app.repositories.account_repository import AccountRepository
from app.utils.exceptions import InsufficientFundsError, NotFoundError


class BalanceManager:
    """Atomic balance adjustment within the caller's transaction."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.account_repo = AccountRepository(session)

    async def adjust_balance(self, account_id: int, delta: Decimal) -> Decimal:
        """
        Add delta to balance.

        Args:
            account_id: Account ID
            delta: Signed amount; negative values debit

        Returns:
            Balance after the adjustment

        Raises:
            NotFoundError: Account does not exist
            InsufficientFundsError: Debit would make balance negative
        """
        stmt = (
            update(Account)
            .where(
                Account.id == account_id,
                Account.balance + delta >= 0,
            )
            .values(balance=Account.balance + delta)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)

        if result.rowcount == 0:
            balance = await self.account_repo.get_balance(account_id)
            if balance is None:
                raise NotFoundError(f"Account {account_id} not found")
            logger.bind(account_id=account_id).info(
                f"Insufficient funds on account {account_id}: "
                f"balance={balance}, requested={-delta}"
            )
            raise InsufficientFundsError(
                f"Insufficient balance: available {balance}, "
                f"requested {-delta}"
            )

        return await self.account_repo.get_balance(account_id)

    async def credit(self, account_id: int, amount: Decimal) -> Decimal:
        return await self.adjust_balance(account_id, amount)

    async def debit(self, account_id: int, amount: Decimal) -> Decimal:
        return await self.adjust_balance(account_id, -amount)
