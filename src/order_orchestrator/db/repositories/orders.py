"""
order_orchestrator.db.repositories.orders

Repository for `Order` / `OrderItem` rows.

Responsibilities:
- Insert an order together with its items.
- Fetch an order with its items.
- Update order status.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from order_orchestrator.db.models import Order, OrderItem, OrderStatus, utcnow


class OrderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        customer_username: str,
        customer_name: str,
        customer_address: str,
        customer_email: str,
        customer_phone: str,
        delivery_date: datetime,
        total_price: Decimal,
        status: OrderStatus,
        created_at: datetime,
        items: Sequence[tuple[str, int, Decimal]],
    ) -> Order:
        order = Order(
            customer_username=customer_username,
            customer_name=customer_name,
            customer_address=customer_address,
            customer_email=customer_email,
            customer_phone=customer_phone,
            delivery_date=delivery_date,
            total_price=total_price,
            status=status,
            created_at=created_at,
            updated_at=created_at,
            items=[
                OrderItem(position=i, product_id=product_id, quantity=qty, unit_price=price)
                for i, (product_id, qty, price) in enumerate(items)
            ],
        )
        self._session.add(order)
        # Flush assigns the order id and writes each item's order_id back-reference.
        await self._session.flush()
        return order

    async def get(self, order_id: uuid.UUID) -> Order | None:
        stmt = select(Order).options(selectinload(Order.items)).where(Order.id == order_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def set_status(self, order_id: uuid.UUID, status: OrderStatus) -> Order | None:
        order = await self._session.get(Order, order_id, with_for_update=True)
        if order is None:
            return None
        order.status = status
        order.updated_at = utcnow()
        await self._session.flush()
        return order
