"""Database engine and per-request sessions.

Learn: The engine is built once from TASKHUB_DATABASE_URL. PostgreSQL
(asyncpg) gets a sized connection pool; SQLite, used by the test suite,
does not take pool arguments. Sessions keep attributes loaded after
commit so routers can serialize what a service just wrote.
"""

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from taskhub.config import settings


def _pool_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {}
    return {"pool_size": 5, "max_overflow": 15}


engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    **_pool_options(settings.database_url),
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncSession:
    """One session per request; uncommitted work is discarded on close."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
