"""Database setup shared by background jobs."""
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

from app.config.database import create_engine, create_session_maker


def create_task_engine() -> AsyncEngine:
    """Engine without pooling; worker threads each run their own loop."""
    return create_engine(echo=False, poolclass=NullPool)


def create_task_session_maker(
    engine: AsyncEngine | None = None,
) -> async_sessionmaker[AsyncSession]:
    """Session maker for jobs."""
    if engine is None:
        engine = create_task_engine()
    return create_session_maker(engine)


# Ready-to-use instances
task_engine = create_task_engine()
task_session_maker = create_task_session_maker(task_engine)
