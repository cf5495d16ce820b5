from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from donormatch.core.config import get_settings
from donormatch.db.base import Base

_settings = get_settings()


def _adapt_url(raw_url: str) -> tuple[URL, dict[str, Any], dict[str, Any]]:
    """
    Return (async_url, connect_args, pool_kwargs) with the async driver set.
    PostgreSQL gets asyncpg and a sized pool; SQLite keeps its default pool.
    """
    url = make_url(raw_url)

    if url.get_backend_name() in {"postgresql", "postgres"}:
        query = dict(url.query)
        sslmode = query.pop("sslmode", None)

        connect_args: dict[str, Any] = {}
        # Hosted Postgres usually requires SSL. asyncpg needs ssl=True.
        if sslmode and sslmode.lower() in {"require", "verify-ca", "verify-full"}:
            connect_args["ssl"] = True

        pool_kwargs = {
            "pool_pre_ping": True,
            "pool_size": 10,
            "max_overflow": 10,
            "pool_timeout": 30,
            "pool_recycle": 1800,  # Recycle connections after 30 min
        }
        return url.set(drivername="postgresql+asyncpg", query=query), connect_args, pool_kwargs

    if url.get_backend_name() == "sqlite" and url.drivername == "sqlite":
        url = url.set(drivername="sqlite+aiosqlite")
    return url, {}, {}


_async_url, _connect_args, _pool_kwargs = _adapt_url(_settings.database_url)

_async_engine = create_async_engine(
    _async_url,
    echo=_settings.db_echo,
    connect_args=_connect_args,
    **_pool_kwargs,
)

_async_session_factory = async_sessionmaker(
    bind=_async_engine,
    expire_on_commit=False,
    autoflush=False,
)


@asynccontextmanager
async def get_async_session() -> AsyncIterator[AsyncSession]:
    async with _async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


@asynccontextmanager
async def async_transaction() -> AsyncIterator[AsyncSession]:
    async with _async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def create_tables() -> None:
    """Create all tables that do not exist yet."""
    from donormatch.db import models  # noqa: F401  registers the tables on Base.metadata

    async with _async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engines() -> None:
    """Call on application shutdown to cleanly close pools."""
    await _async_engine.dispose()


__all__ = [
    "get_async_session",
    "async_transaction",
    "create_tables",
    "dispose_engines",
]
