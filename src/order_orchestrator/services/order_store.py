"""
order_orchestrator.services.order_store

Exclusive owner of persisted Order/OrderItem rows.

Responsibilities:
- Write a new PROCESSING order and all of its items as one local unit of work.
- Apply status transitions (PROCESSING -> CONFIRMED | FAILED) as their own commits.
- Translate database failures into `PersistenceError`.

The commit boundary here covers only these local writes. Collaborator calls made
before or after a commit are never rolled back by it.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from order_orchestrator.db.models import Order, OrderStatus
from order_orchestrator.db.repositories.orders import OrderRepo
from order_orchestrator.errors import PersistenceError
from order_orchestrator.observability.logging import get_logger
from order_orchestrator.schemas import OrderRequest

log = get_logger(__name__)


class OrderRecordStore:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._orders = OrderRepo(session)

    async def create_processing(
        self,
        *,
        request: OrderRequest,
        delivery_date: datetime,
        total_price: Decimal,
        created_at: datetime,
        items: Sequence[tuple[str, int, Decimal]],
    ) -> uuid.UUID:
        try:
            order = await self._orders.create(
                customer_username=request.customer_username,
                customer_name=request.customer_name,
                customer_address=request.customer_address,
                customer_email=request.customer_email,
                customer_phone=request.customer_phone,
                delivery_date=delivery_date,
                total_price=total_price,
                status=OrderStatus.processing,
                created_at=created_at,
                items=items,
            )
            order_id = order.id
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            log.error("order.persist_failed", error=str(e))
            raise PersistenceError(f"Cannot save order: {e}") from e
        return order_id

    async def mark(self, order_id: uuid.UUID, status: OrderStatus) -> None:
        try:
            order = await self._orders.set_status(order_id, status)
            if order is None:
                raise PersistenceError(f"Order {order_id} vanished before status update")
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            log.error("order.status_update_failed", order_id=str(order_id), error=str(e))
            raise PersistenceError(f"Cannot update order status: {e}") from e

    async def get(self, order_id: uuid.UUID) -> Order | None:
        try:
            return await self._orders.get(order_id)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Cannot load order: {e}") from e
