"""Database Session Manager — async sessions over the hosted marketplace database.

Invariants:
    - Every session rolls back on exception and is always closed
    - SQLAlchemy errors escaping a session become DatabaseError (503); an escaping
      IntegrityError is a data conflict and becomes ConflictError (409)
    - Unique-constraint races on inserts (booking idempotency keys, slot
      date/start, purchase-request keys) are resolved by try_unique_write /
      write_unique, never by ad-hoc IntegrityError handling in services
    - Pool sizing applies to server databases only; SQLite keeps its own pool

Design Decisions:
    - Singleton db_manager initialized by the lifespan; background tasks (lead
      qualification) open their own session through get_db_manager()
    - expire_on_commit=False: committed rows stay readable for responses and audit rows
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import text

from urbanestate.core.errors import ConflictError, DatabaseError, ErrorContext

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Engine + session factory for profiles, listings, bookings, leads and the marketplace."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_options: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_options.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_options)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session with rollback and error mapping on the way out."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.warning(f"Unhandled integrity violation: {e}")
            raise ConflictError("The request conflicts with existing data")
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise DatabaseError("Connection or operational error", "execute")
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}")
            raise DatabaseError("Database driver error", "query")
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "unknown")
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """SELECT 1 through a fresh session, for the readiness check."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except DatabaseError as e:
            logger.error(f"DB health check failed: {e}")
            return False


# ─── Unique-constraint writes ───────────────────────────────────

async def try_unique_write(db: AsyncSession, *, flush_only: bool = False) -> bool:
    """Commit (or flush) pending rows. False when a unique constraint lost a race;
    the session is rolled back and the pending rows are discarded."""
    try:
        if flush_only:
            await db.flush()
        else:
            await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.info(f"Unique constraint race: {e.orig}")
        return False
    return True


async def write_unique(
    db: AsyncSession,
    conflict_message: str,
    *,
    flush_only: bool = False,
    context: ErrorContext | None = None,
) -> None:
    """try_unique_write that answers a lost race with ConflictError (409)."""
    if not await try_unique_write(db, flush_only=flush_only):
        raise ConflictError(conflict_message, context=context)


# ─── Singleton ──────────────────────────────────────────────────

db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs):
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)


def get_db_manager() -> DatabaseSessionManager:
    if not db_manager:
        raise RuntimeError("Database not initialized")
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    async with get_db_manager().session() as session:
        yield session
