"""
order_orchestrator.db.models

Persistence schema for placed orders.

Responsibilities:
- Order: customer snapshot, delivery date, fixed total and workflow status.
- OrderItem: product reference (owned by the catalog service) and the unit price
  captured when the order was placed.
"""

from __future__ import annotations

import enum
import uuid
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import Enum, ForeignKey, Index, Numeric, String, Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from order_orchestrator.db.base import Base

MONEY = Numeric(12, 2, asdecimal=True)


def utcnow() -> datetime:
    # Timestamps are stored as naive UTC.
    return datetime.now(tz=UTC).replace(tzinfo=None)


class OrderStatus(enum.StrEnum):
    processing = "PROCESSING"
    confirmed = "CONFIRMED"
    # Inventory commit failed after persistence; earlier decrements were compensated.
    failed = "FAILED"


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )

    customer_username: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    customer_name: Mapped[str] = mapped_column(String(256), nullable=False)
    customer_address: Mapped[str] = mapped_column(String(512), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(256), nullable=False)
    customer_phone: Mapped[str] = mapped_column(String(64), nullable=False)

    delivery_date: Mapped[datetime] = mapped_column(nullable=False)
    total_price: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    status: Mapped[OrderStatus] = mapped_column(Enum(OrderStatus), nullable=False, index=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, onupdate=utcnow)

    # selectin keeps item access safe under AsyncSession (no implicit lazy IO).
    items: Mapped[list[OrderItem]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderItem.position",
    )


class OrderItem(Base):
    __tablename__ = "order_items"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    order_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("orders.id"), nullable=False, index=True
    )
    # Request order is preserved; notification payloads and lookups list items in it.
    position: Mapped[int] = mapped_column(nullable=False, default=0)

    product_id: Mapped[str] = mapped_column(String(64), nullable=False)
    quantity: Mapped[int] = mapped_column(nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    order: Mapped[Order] = relationship(back_populates="items")

    __table_args__ = (Index("ix_order_items_order_position", "order_id", "position"),)


# --- Module Notes -----------------------------------------------------------
# There is no delete path: orders are only created, status-updated and read.
