"""Async engine and session factory shared by routes, the chat socket and background tasks."""
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from chefbook.config import settings


def _engine_options(url: str) -> dict:
    options: dict = {"echo": settings.SQL_ECHO}
    # Pooled server connections can go stale between requests; sqlite files cannot
    if make_url(url).get_backend_name() != "sqlite":
        options["pool_pre_ping"] = True
    return options


# URL must use an async driver (asyncpg / aiosqlite)
engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


async def get_db():
    """Request-scoped session: commits when the route returns, rolls back if it raises."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
