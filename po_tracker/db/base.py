"""Declarative base, engine lifecycle and session factory for the tracker tables."""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from po_tracker.core.config import get_settings


class Base(DeclarativeBase):
    pass


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _engine_options(url: str) -> dict:
    """Pool options per backend. SQLite (aiosqlite) keeps SQLAlchemy's defaults."""
    settings = get_settings()
    options: dict = {"echo": settings.debug}
    if make_url(url).get_backend_name() != "sqlite":
        options.update(
            pool_pre_ping=True,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
        )
    return options


async def init_db(url: str | None = None, *, reset: bool = False) -> None:
    """Create the engine and session factory, then create the tracker tables.

    Args:
        url: Database URL; defaults to settings.database_url
        reset: Drop every tracker table before creating them (throwaway databases only)
    """
    global _engine, _session_factory

    if _engine is not None:
        return

    db_url = url or get_settings().database_url

    _engine = create_async_engine(db_url, **_engine_options(db_url))
    _session_factory = async_sessionmaker(_engine, class_=AsyncSession, expire_on_commit=False)

    # items, purchase_orders, purchase_order_items and process_history
    import po_tracker.db.models  # noqa: F401

    async with _engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


async def close_db(*, drop_tables: bool = False) -> None:
    """Dispose of the engine, optionally dropping the tracker tables first."""
    global _engine, _session_factory

    if _engine is None:
        return

    if drop_tables:
        async with _engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    await _engine.dispose()
    _engine = None
    _session_factory = None


def get_engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the session factory every service and route opens sessions from.

    Raises RuntimeError if init_db() has not been called.
    """
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _session_factory
