"""
Transaction runner.

Runs a unit of work in one database transaction: all writes commit
together or none do.
"""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.utils.exceptions import LedgerError, TransactionFailure

T = TypeVar("T")


class TransactionRunner:
    """Executes callables inside a fresh session and transaction."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self.session_maker = session_maker

    async def run(
        self,
        work: Callable[[AsyncSession], Awaitable[T]],
        operation: str = "transaction",
    ) -> T:
        """
        Run work in a transaction.

        Commits when work returns. Any exception rolls back every write
        made inside the transaction.

        Args:
            work: Async callable receiving the session
            operation: Name used in log messages

        Returns:
            Whatever work returned

        Raises:
            LedgerError: Raised by work, propagated unchanged
            TransactionFailure: Storage error during work or commit
        """
        try:
            async with self.session_maker() as session:
                async with session.begin():
                    return await work(session)
        except LedgerError:
            raise
        except SQLAlchemyError as e:
            logger.bind(operation=operation).error(
                f"{operation} rolled back: {type(e).__name__}: {e}"
            )
            raise TransactionFailure(f"{operation} failed: {e}") from e
