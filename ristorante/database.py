"""
Ristorante API: Database Session Management
============================================

What:  Async SQLAlchemy engine holder, declarative base and the FastAPI
       dependencies that hand a session to each request.
How:   `create_app()` builds one `Database` per application (or None when
       DATABASE_URL is unset) and stores it on `app.state.database`.
       `get_database` turns the missing case into a ConfigurationError;
       `get_db_session` opens a session per request that commits on success
       and rolls back on error.
Who:   Route handlers via `Depends(get_db_session, scope="function")`; routers list
       `Depends(get_database)` so the configuration check runs before the
       admin guard and before any handler code.

Connection Pooling:
    pool_size / max_overflow come from Settings (5 / 5 by default). Every
    handler performs at most one statement, so connections are held only for
    the duration of a single round trip.
    pool_pre_ping: validates connections before use (managed Postgres
    providers close idle connections aggressively).
"""

import logging
from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from ristorante.config import Settings
from ristorante.exceptions import ConfigurationError, DatabaseError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object, which Alembic reads for migrations.
    """
    pass


class Database:
    """
    Owns the engine and session factory for one application instance.

    Creating it does not open a connection; the pool connects lazily on the
    first statement.
    """

    def __init__(self, settings: Settings):
        self.engine: AsyncEngine = create_async_engine(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
            echo=settings.log_level == "DEBUG",
        )
        # expire_on_commit=False: returned rows are serialized after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def dispose(self) -> None:
        """Closes every pooled connection. Called from the lifespan hook."""
        await self.engine.dispose()


def build_database(settings: Settings) -> Optional[Database]:
    """Returns a Database for the configured URL, or None when it is unset."""
    if not settings.database_url:
        return None
    return Database(settings)


# ── Dependencies ──────────────────────────────────────────────────────────
def get_database(request: Request) -> Database:
    """
    Resolves the application's Database.

    Raises:
        ConfigurationError: DATABASE_URL is unset (→ 500 "DATABASE_URL missing").
    """
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise ConfigurationError("DATABASE_URL missing")
    return database


async def get_db_session(
    database: Database = Depends(get_database),
) -> AsyncGenerator[AsyncSession, None]:
    """
    Provides a database session per request.

    Handlers declare it with `Depends(get_db_session, scope="function")` so
    the code after `yield` runs before the response is built, not after it
    has been sent.

    How it works:
        1. Opens a session from the factory (no connection yet)
        2. Yields it to the handler, whose single statement checks out a
           pooled connection
        3. On handler error: rolls back and re-raises for the global handlers
        4. On success: commits; a failed COMMIT is rolled back and reported
           as DatabaseError (→ 500), so no write is acknowledged unless it
           is durable
        5. Always: closes the session, returning the connection to the pool
    """
    async with database.session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise

        try:
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error("Commit failed: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__}) from e
