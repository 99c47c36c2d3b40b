"""
Notes Service - Database Engine & Session Management
=====================================================

What:  Async SQLAlchemy engine, session factory and declarative base.
How:   `Database` wraps one async engine over aiosqlite and the session factory
       bound to it. The application factory creates one instance per app and
       hands its session factory to the NoteStore; nothing here is created at
       import time.
Who:   Used by the application factory, the NoteStore, the health route and tests.
When:  Created with the app; the schema is created at startup, the engine is
       disposed at shutdown.

SQLite specifics:
    - connect_args["timeout"]: busy timeout, so a writer waiting on a locked
      file fails after `db_busy_timeout` seconds instead of hanging.
    - PRAGMA foreign_keys is irrelevant (single table) and left at its default.
"""

import logging
from typing import Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from notes_service.config import Settings

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Registers models with a single metadata object, which is what both
    `Database.create_all()` and Alembic's autogenerate read.
    """
    pass


class Database:
    """
    Owns the async engine and session factory for one application instance.

    Attributes:
        engine:           AsyncEngine bound to `settings.database_url`
        session_factory:  async_sessionmaker producing AsyncSession objects
    """

    def __init__(self, settings: Settings, engine: Optional[AsyncEngine] = None):
        self.settings = settings
        self.engine = engine or create_async_engine(
            settings.database_url,
            connect_args={"timeout": settings.db_busy_timeout},
            # SQL echo only in DEBUG; it is very noisy otherwise
            echo=settings.log_level == "DEBUG",
        )
        # expire_on_commit=False: ORM objects stay readable after the
        # transaction that loaded them has been committed
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_all(self) -> None:
        """
        Create every table registered on `Base.metadata` if missing.

        Runs on every boot (CREATE TABLE IF NOT EXISTS semantics);
        Alembic (alembic/versions/001) produces the same schema.
        """
        # Imported for its side effect of registering the table on Base.metadata
        from notes_service.models.note import Note  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready (%s)", self.engine.url.render_as_string(hide_password=True))

    async def ping(self) -> bool:
        """Run `SELECT 1`; False when the database cannot be reached."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    async def dispose(self) -> None:
        """Close all pooled connections (application shutdown)."""
        await self.engine.dispose()
