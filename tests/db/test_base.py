"""Tests for engine lifecycle in po_tracker.db.base."""

import pytest
from sqlalchemy import inspect

from po_tracker.db.base import _engine_options, close_db, get_engine, get_session_factory, init_db

TRACKER_TABLES = {"items", "purchase_orders", "purchase_order_items", "process_history"}


@pytest.mark.unit
def test_session_factory_requires_init():
    with pytest.raises(RuntimeError, match="init_db"):
        get_session_factory()


@pytest.mark.unit
def test_sqlite_keeps_default_pool():
    options = _engine_options("sqlite+aiosqlite:///tracker.db")

    assert "pool_size" not in options
    assert "pool_pre_ping" not in options


@pytest.mark.unit
def test_server_database_gets_pool_settings():
    options = _engine_options("postgresql+asyncpg://u:p@db:5432/potracker")

    assert options["pool_pre_ping"] is True
    assert options["pool_size"] == 5
    assert options["max_overflow"] == 10


@pytest.mark.integration
async def test_init_db_creates_tables_from_explicit_url(tmp_path):
    await init_db(f"sqlite+aiosqlite:///{tmp_path / 'explicit.db'}")
    try:
        engine = get_engine()
        # a second call keeps the first engine
        await init_db(f"sqlite+aiosqlite:///{tmp_path / 'other.db'}")
        assert get_engine() is engine

        async with engine.connect() as conn:
            tables = await conn.run_sync(lambda sync_conn: set(inspect(sync_conn).get_table_names()))
        assert TRACKER_TABLES <= tables
    finally:
        await close_db()

    with pytest.raises(RuntimeError):
        get_engine()
