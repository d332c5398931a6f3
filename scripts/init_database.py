#!/usr/bin/env python3
"""Initialize database tables and default site settings."""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from loguru import logger  # noqa: E402

from app.config.database import create_engine, create_session_maker  # noqa: E402
from app.models import Base  # noqa: E402
from app.repositories.global_settings_repository import (  # noqa: E402
    GlobalSettingsRepository,
)

# Configure logger for script
logger.remove()
logger.add(sys.stderr, level="INFO")


async def init_database() -> None:
    """Create all database tables and seed missing settings."""
    logger.info("Connecting to database...")
    engine = create_engine(echo=False)

    try:
        async with engine.begin() as conn:
            logger.info("Creating tables (checkfirst=True)...")
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)

        session_maker = create_session_maker(engine)
        async with session_maker() as session:
            async with session.begin():
                inserted = await GlobalSettingsRepository(session).ensure_defaults()

        if inserted:
            logger.info(f"Seeded settings: {', '.join(inserted)}")
    finally:
        await engine.dispose()

    logger.success("Database initialized successfully!")


if __name__ == "__main__":
    asyncio.run(init_database())
