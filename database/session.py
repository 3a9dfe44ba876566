"""
Lazily-established async SQLAlchemy connection.

``ConnectionGuard`` owns the engine for the lifetime of the process.  The
first ``ensure_connected()`` call checks configuration, opens the engine,
verifies the database answers and makes sure the ``users`` table and its
unique constraints exist.  Success is remembered; a failure is not, so
the next request simply tries again.

Concurrent first calls are serialised on an ``asyncio.Lock`` and re-check
the connected state once they hold it, so exactly one engine is ever
installed.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from auth.errors import ConfigurationError, StoreUnavailableError
from config.settings import Settings, config
from database.models import Base

logger = logging.getLogger(__name__)


class ConnectionGuard:
    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or config
        self._lock = asyncio.Lock()
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_connected(self) -> bool:
        return self._session_factory is not None

    async def ensure_connected(self) -> None:
        """
        Connect on first use; a no-op once connected.

        Raises ``ConfigurationError`` if DATABASE_URL or JWT_SECRET is
        unset and ``StoreUnavailableError`` if the database cannot be
        reached.
        """
        if self.is_connected:
            logger.debug("Using existing database connection")
            return

        missing = self._settings.missing_settings
        if missing:
            logger.error("Required settings are not defined: %s", ", ".join(missing))
            raise ConfigurationError()

        async with self._lock:
            if self.is_connected:
                return
            engine = await self._connect(self._settings.database_url)
            self._engine = engine
            self._session_factory = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
            logger.info("New database connection established")

    async def _connect(self, url: str) -> AsyncEngine:
        engine: Optional[AsyncEngine] = None
        try:
            engine = create_async_engine(url, **self._engine_options(url))
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except Exception as exc:
            logger.error("Database connection error: %s", exc)
            if engine is not None:
                await engine.dispose()
            raise StoreUnavailableError() from exc
        return engine

    def _engine_options(self, url: str) -> dict:
        if url.startswith("sqlite"):
            return {"echo": False}
        return {
            "echo": False,
            "pool_size": self._settings.database_pool_size,
            "max_overflow": self._settings.database_max_overflow,
            "pool_pre_ping": True,
            "pool_recycle": 3600,
        }

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session; rolls back if the body raises."""
        if self._session_factory is None:
            raise RuntimeError("ensure_connected() must succeed before opening a session")
        async with self._session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def dispose(self) -> None:
        """Close pooled connections; the next call reconnects."""
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._session_factory = None
