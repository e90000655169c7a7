"""PostgreSQL engine and session factory.

Environment Variables:
- DATABASE_URL: PostgreSQL connection string, required when the
  PostgreSQL adapters are wired. Plain postgresql:// and postgres:// URLs
  are rewritten to the asyncpg driver.
- SQLALCHEMY_ECHO: "1", "true" or "yes" to echo SQL statements.
"""

from __future__ import annotations

import os

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from structlog import get_logger

from gavel.domain.errors.configuration import ConfigurationError

logger = get_logger(__name__)

_ASYNC_DRIVER = "postgresql+asyncpg://"
_SYNC_PREFIXES = ("postgresql://", "postgres://")

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def database_url_from_env() -> str:
    """Read DATABASE_URL and force the asyncpg driver.

    Raises:
        ConfigurationError: If DATABASE_URL is unset or empty.
    """
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        raise ConfigurationError("DATABASE_URL", "required for PostgreSQL adapters")

    for prefix in _SYNC_PREFIXES:
        if url.startswith(prefix):
            return _ASYNC_DRIVER + url[len(prefix) :]
    if url.startswith(_ASYNC_DRIVER):
        return url
    return _ASYNC_DRIVER + url


def _echo_enabled() -> bool:
    return os.environ.get("SQLALCHEMY_ECHO", "").lower() in ("1", "true", "yes")


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the process-wide session factory, creating the engine once."""
    global _engine, _session_factory

    if _session_factory is None:
        url = database_url_from_env()
        log = logger.bind(
            component="database",
            url=make_url(url).render_as_string(hide_password=True),
        )

        _engine = create_async_engine(url, echo=_echo_enabled(), pool_pre_ping=True)
        _session_factory = async_sessionmaker(
            bind=_engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        log.info("database_engine_created")

    return _session_factory


async def dispose_engine() -> None:
    """Close pooled connections on shutdown."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.info("database_engine_disposed")
    _engine = None
    _session_factory = None


def reset_database() -> None:
    """Forget the engine without disposing it (tests only)."""
    global _engine, _session_factory
    _engine = None
    _session_factory = None
