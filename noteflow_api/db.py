from __future__ import annotations

import logging

from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from noteflow_api.settings import get_settings

logger = logging.getLogger(__name__)

ASYNC_DRIVERS = {"sqlite": "sqlite+aiosqlite", "postgres": "postgresql+asyncpg", "postgresql": "postgresql+asyncpg"}
LOCAL_HOSTS = {None, "", "localhost", "127.0.0.1"}


def async_database_url(database_url: str) -> URL:
    """Point plain sqlite/postgres URLs at their async drivers.

    libpq-only query options (sslmode, channel_binding) are dropped; asyncpg
    takes TLS through connect_args instead.
    """
    url = make_url(str(database_url).strip())
    backend = url.get_backend_name()
    if backend == "postgres" or url.drivername in ASYNC_DRIVERS or url.drivername == "postgresql+psycopg2":
        url = url.set(drivername=ASYNC_DRIVERS.get(backend, "postgresql+asyncpg"))
    if url.get_backend_name() == "postgresql":
        url = url.difference_update_query(["sslmode", "channel_binding", "ssl"])
    return url


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker | None = None


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is not None:
        return _engine
    url = async_database_url(get_settings().database_url)
    if url.get_backend_name() == "sqlite":
        _engine = create_async_engine(url)
    else:
        connect_args = {} if url.host in LOCAL_HOSTS else {"ssl": True}
        _engine = create_async_engine(
            url, connect_args=connect_args, pool_pre_ping=True, pool_size=10, max_overflow=10
        )
    logger.info("Database engine ready (%s, host %s)", url.get_backend_name(), url.host or "<local>")
    return _engine


def get_sessionmaker() -> async_sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(get_engine(), expire_on_commit=False)
    return _session_factory


async def dispose_engine() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
