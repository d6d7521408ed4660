# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Async SQLAlchemy engine singleton and schema bootstrap."""
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from mealsignup.core.config import settings
from mealsignup.repositories.tables import metadata


def build_engine(url: str) -> AsyncEngine:
    """Create an engine for ``url``; SQLite files get a connection per checkout."""
    if url.startswith("sqlite"):
        return create_async_engine(url, poolclass=NullPool)
    return create_async_engine(
        url,
        pool_pre_ping=True,
        pool_size=settings.POOL_SIZE,
        max_overflow=settings.MAX_OVERFLOW,
        pool_recycle=settings.POOL_RECYCLE,
    )


async def create_schema(target: AsyncEngine) -> None:
    async with target.begin() as conn:
        await conn.run_sync(metadata.create_all)


async def drop_schema(target: AsyncEngine) -> None:
    async with target.begin() as conn:
        await conn.run_sync(metadata.drop_all)


engine = build_engine(settings.DATABASE_URL)
