"""ItemService — catalog item CRUD with material-number uniqueness."""

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from po_tracker.core.exceptions import ConflictError, NotFoundError
from po_tracker.db.models.item import Item
from po_tracker.schemas.items import ItemRequest

logger = structlog.get_logger(__name__)


class ItemService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def list_items(self) -> list[Item]:
        async with self.session_factory() as session:
            result = await session.execute(select(Item).order_by(Item.id))
            return list(result.scalars().all())

    async def get_item(self, item_id: int) -> Item:
        async with self.session_factory() as session:
            item = await session.get(Item, item_id)
            if item is None:
                raise NotFoundError("Item not found")
            return item

    async def create_item(self, data: ItemRequest) -> Item:
        """Create a catalog item.

        Raises:
            ConflictError: material number already used (case-insensitive)
        """
        async with self.session_factory() as session:
            if await self._find_by_material_number(session, data.material_number) is not None:
                raise ConflictError(f"Material Number '{data.material_number}' already exists")

            item = Item(**data.model_dump())
            session.add(item)
            await session.commit()
            await session.refresh(item)

        logger.info("item_created", item_id=item.id, material_number=item.material_number)
        return item

    async def update_item(self, item_id: int, data: ItemRequest) -> Item:
        """Replace a catalog item's fields.

        Raises:
            NotFoundError: no such item
            ConflictError: new material number already used by another item
        """
        async with self.session_factory() as session:
            item = await session.get(Item, item_id)
            if item is None:
                raise NotFoundError("Item not found")

            if data.material_number.lower() != item.material_number.lower():
                if await self._find_by_material_number(session, data.material_number) is not None:
                    raise ConflictError(f"Material Number '{data.material_number}' already exists")

            for field, value in data.model_dump().items():
                setattr(item, field, value)

            await session.commit()
            await session.refresh(item)

        logger.info("item_updated", item_id=item.id)
        return item

    async def _find_by_material_number(self, session: AsyncSession, material_number: str) -> Item | None:
        result = await session.execute(
            select(Item).where(func.lower(Item.material_number) == material_number.lower())
        )
        return result.scalars().first()
