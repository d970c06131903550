"""Shared test fixtures for all test groups.

Service and API tests run against a throwaway SQLite database (aiosqlite) so
they need no external server. Set TEST_DATABASE_URL to point them at Postgres.
"""

import os
from datetime import datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from po_tracker.db.base import close_db, get_engine, get_session_factory, init_db
from po_tracker.db.models.item import Item
from po_tracker.db.models.purchase_order import PurchaseOrder, PurchaseOrderItem
from po_tracker.domain.stages import initialize_stages, serialize_stages


@pytest.fixture
async def engine(tmp_path) -> AsyncEngine:
    """Initialize the application database against a throwaway store.

    Route handlers call get_session_factory(), so this goes through init_db()
    and close_db() exactly as the app lifespan does.
    """
    db_url = os.getenv("TEST_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(db_url, reset=True)

    yield get_engine()

    await close_db(drop_tables=True)


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return get_session_factory()


@pytest.fixture
async def db_session(session_factory) -> AsyncSession:
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_item(session_factory):
    """Factory fixture: persist a catalog item and return it."""
    counter = [0]

    async def _make_item(weight: float | None = 2.5, **overrides) -> Item:
        counter[0] += 1
        fields = {
            "material_number": f"MAT-{counter[0]:04d}",
            "vendor_name": "RUBBER METSO",
            "drawing_number": f"DRW-{counter[0]:04d}",
            "item_name": f"Liner plate {counter[0]}",
            "description": "Wear liner",
            "price": 1200,
            "weight": weight,
        }
        fields.update(overrides)
        async with session_factory() as session:
            item = Item(**fields)
            session.add(item)
            await session.commit()
            return item

    return _make_item


@pytest.fixture
def make_order(session_factory):
    """Factory fixture: persist a purchase order with lines.

    Each line is a dict with item_id, quantity and optionally processes
    (raw blob; defaults to a fresh serialized stage array).
    """

    async def _make_order(
        order_date: datetime,
        lines: list[dict],
        delivery_date: datetime | None = None,
        po_number: str = "PO-0001",
    ) -> PurchaseOrder:
        async with session_factory() as session:
            order = PurchaseOrder(
                po_number=po_number,
                vendor_name="RUBBER METSO",
                order_date=order_date,
                delivery_date=delivery_date,
            )
            order.items = [
                PurchaseOrderItem(
                    item_id=line["item_id"],
                    quantity=line.get("quantity", 1),
                    processes=line.get("processes", serialize_stages(initialize_stages())),
                )
                for line in lines
            ]
            session.add(order)
            await session.commit()
            return order

    return _make_order


@pytest.fixture
def dispatched_blob() -> str:
    """Stage blob whose final stage (Ready For Dispatch) is completed."""
    stages = initialize_stages()
    stages[-1].completed = True
    return serialize_stages(stages)
