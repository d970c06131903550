"""PurchaseOrderService — purchase orders and their lines.

New lines always start with a freshly initialized stage array. Stage data is
only changed through ProcessTracker, never through the line CRUD here.
"""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from po_tracker.core.exceptions import NotFoundError
from po_tracker.db.models.item import Item
from po_tracker.db.models.purchase_order import PurchaseOrder, PurchaseOrderItem
from po_tracker.domain.progress import compute_line_progress, is_dispatched
from po_tracker.domain.stages import initialize_stages, parse_stages, serialize_stages
from po_tracker.schemas.items import ItemResponse
from po_tracker.schemas.process import StageRecordResponse
from po_tracker.schemas.purchase_orders import (
    CreatePurchaseOrderRequest,
    LineCreateRequest,
    LineResponse,
    LineUpdateRequest,
    PurchaseOrderHeader,
    PurchaseOrderResponse,
)

logger = structlog.get_logger(__name__)


def line_to_response(line: PurchaseOrderItem) -> LineResponse:
    """Convert an ORM line (item loaded) to its response, parsing the stage blob."""
    stages = parse_stages(line.processes)
    return LineResponse(
        id=line.id,
        po_id=line.po_id,
        item_id=line.item_id,
        quantity=line.quantity,
        price_override=line.price_override,
        item=ItemResponse.model_validate(line.item) if line.item is not None else None,
        processes=[StageRecordResponse(**record.to_dict()) for record in stages],
        progress=compute_line_progress(stages),
        dispatched=is_dispatched(stages),
    )


def order_to_response(order: PurchaseOrder) -> PurchaseOrderResponse:
    return PurchaseOrderResponse(
        id=order.id,
        po_number=order.po_number,
        vendor_name=order.vendor_name,
        order_date=order.order_date,
        delivery_date=order.delivery_date,
        remarks=order.remarks,
        created_at=order.created_at,
        items=[line_to_response(line) for line in order.items],
    )


def _new_line(data: LineCreateRequest) -> PurchaseOrderItem:
    return PurchaseOrderItem(
        item_id=data.item_id,
        quantity=data.quantity,
        price_override=data.price_override,
        processes=serialize_stages(initialize_stages()),
    )


class PurchaseOrderService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """Initialize with an injected session factory.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self.session_factory = session_factory

    async def list_purchase_orders(self) -> list[PurchaseOrderResponse]:
        async with self.session_factory() as session:
            result = await session.execute(self._order_query().order_by(PurchaseOrder.id))
            return [order_to_response(order) for order in result.scalars().all()]

    async def get_purchase_order(self, po_id: int) -> PurchaseOrderResponse:
        async with self.session_factory() as session:
            order = await self._load_order(session, po_id)
            return order_to_response(order)

    async def create_purchase_order(self, data: CreatePurchaseOrderRequest) -> PurchaseOrderResponse:
        """Create an order with its lines; every line starts at "never started".

        Raises:
            NotFoundError: a line references an unknown catalog item
        """
        async with self.session_factory() as session:
            await self._ensure_items_exist(session, {line.item_id for line in data.items})

            order = PurchaseOrder(**data.model_dump(exclude={"items"}))
            order.items = [_new_line(line) for line in data.items]
            session.add(order)
            await session.commit()

            order = await self._load_order(session, order.id)
            logger.info("purchase_order_created", po_id=order.id, po_number=order.po_number, lines=len(order.items))
            return order_to_response(order)

    async def update_purchase_order(self, po_id: int, data: PurchaseOrderHeader) -> PurchaseOrderResponse:
        """Replace the order header. Lines are untouched."""
        async with self.session_factory() as session:
            order = await self._load_order(session, po_id)
            for field, value in data.model_dump().items():
                setattr(order, field, value)
            await session.commit()

            order = await self._load_order(session, po_id)
            logger.info("purchase_order_updated", po_id=po_id)
            return order_to_response(order)

    async def add_line(self, po_id: int, data: LineCreateRequest) -> LineResponse:
        async with self.session_factory() as session:
            if await session.get(PurchaseOrder, po_id) is None:
                raise NotFoundError("Purchase Order not found")
            await self._ensure_items_exist(session, {data.item_id})

            line = _new_line(data)
            line.po_id = po_id
            session.add(line)
            await session.commit()

            line = await self._load_line(session, line.id)
            logger.info("purchase_order_line_added", po_id=po_id, po_item_id=line.id)
            return line_to_response(line)

    async def update_line(self, po_item_id: int, data: LineUpdateRequest) -> LineResponse:
        """Change quantity and/or price override. Only fields sent are applied."""
        async with self.session_factory() as session:
            line = await self._load_line(session, po_item_id)
            changes = data.model_dump(exclude_unset=True)
            if changes.get("quantity") is None:
                changes.pop("quantity", None)  # quantity is required; null means "keep"
            for field, value in changes.items():
                setattr(line, field, value)
            await session.commit()

            line = await self._load_line(session, po_item_id)
            return line_to_response(line)

    async def delete_line(self, po_item_id: int) -> None:
        """Delete a whole line. Its history rows stay in the ledger."""
        async with self.session_factory() as session:
            line = await session.get(PurchaseOrderItem, po_item_id)
            if line is None:
                raise NotFoundError("Purchase order item not found")
            await session.delete(line)
            await session.commit()

        logger.info("purchase_order_line_deleted", po_item_id=po_item_id)

    @staticmethod
    def _order_query():
        return select(PurchaseOrder).options(
            selectinload(PurchaseOrder.items).selectinload(PurchaseOrderItem.item)
        )

    async def _load_order(self, session: AsyncSession, po_id: int) -> PurchaseOrder:
        result = await session.execute(
            self._order_query()
            .where(PurchaseOrder.id == po_id)
            .execution_options(populate_existing=True)
        )
        order = result.scalar_one_or_none()
        if order is None:
            raise NotFoundError("Purchase Order not found")
        return order

    async def _load_line(self, session: AsyncSession, po_item_id: int) -> PurchaseOrderItem:
        result = await session.execute(
            select(PurchaseOrderItem)
            .options(selectinload(PurchaseOrderItem.item))
            .where(PurchaseOrderItem.id == po_item_id)
            .execution_options(populate_existing=True)
        )
        line = result.scalar_one_or_none()
        if line is None:
            raise NotFoundError("Purchase order item not found")
        return line

    async def _ensure_items_exist(self, session: AsyncSession, item_ids: set[int]) -> None:
        if not item_ids:
            return
        result = await session.execute(select(Item.id).where(Item.id.in_(item_ids)))
        missing = item_ids - set(result.scalars().all())
        if missing:
            raise NotFoundError(f"Item {min(missing)} not found")
