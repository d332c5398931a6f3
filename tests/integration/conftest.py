"""
Fixtures for integration tests.

Each test gets its own SQLite database file, so concurrent connections
see each other's commits like they would on a real server.
"""

from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy.pool import NullPool

from app.config.database import create_engine, create_session_maker
from app.models import (
    Account,
    InvestmentProduct,
    ProductStatus,
    ReferralTier,
    ReturnPeriodUnit,
)
from app.models.base import Base
from app.repositories.account_repository import AccountRepository
from app.repositories.global_settings_repository import GlobalSettingsRepository


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}", poolclass=NullPool
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return create_session_maker(engine)


@pytest.fixture
def make_account(session_maker):
    """Factory creating an account; returns its ID."""

    async def _make(
        balance: str = "0",
        referred_by_id: int | None = None,
        referral_tier: ReferralTier = ReferralTier.BRONZE,
        referral_count: int = 0,
    ) -> int:
        async with session_maker() as session:
            async with session.begin():
                account = Account(
                    balance=Decimal(balance),
                    referred_by_id=referred_by_id,
                    referral_tier=referral_tier.value,
                    referral_count=referral_count,
                )
                session.add(account)
                await session.flush()
                return account.id

    return _make


@pytest.fixture
def make_product(session_maker):
    """Factory creating an investment product; returns its ID."""

    async def _make(
        return_rate: str = "5",
        return_period: int = 1,
        unit: ReturnPeriodUnit = ReturnPeriodUnit.DAY,
        minimum_amount: str = "10",
        status: ProductStatus = ProductStatus.ACTIVE,
        name: str = "Starter plan",
    ) -> int:
        async with session_maker() as session:
            async with session.begin():
                product = InvestmentProduct(
                    name=name,
                    minimum_amount=Decimal(minimum_amount),
                    return_rate=Decimal(return_rate),
                    return_period=return_period,
                    return_period_unit=unit.value,
                    status=status.value,
                )
                session.add(product)
                await session.flush()
                return product.id

    return _make


@pytest.fixture
def balance_of(session_maker):
    """Read committed balance of an account."""

    async def _balance(account_id: int) -> Decimal:
        async with session_maker() as session:
            return await AccountRepository(session).get_balance(account_id)

    return _balance


@pytest.fixture
def set_setting(session_maker):
    """Write a site setting."""

    async def _set(key: str, value: str) -> None:
        async with session_maker() as session:
            async with session.begin():
                await GlobalSettingsRepository(session).set_value(key, value)

    return _set
