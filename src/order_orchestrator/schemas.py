"""
order_orchestrator.schemas

Request/response models shared by the API and service layers.

Empty item lists and missing delivery dates are accepted here on purpose; the
orchestrator's `validate` phase rejects them with a `ValidationError` so every
entry point (HTTP or in-process) gets the same error type.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from order_orchestrator.db.models import OrderStatus

UNKNOWN = "Unknown"
UNKNOWN_EMAIL = "unknown@example.com"
# Keeps line totals well inside Decimal precision for any storable unit price.
MAX_ITEM_QUANTITY = 100_000


class OrderItemRequest(BaseModel):
    product_id: str = Field(min_length=1, max_length=64)
    quantity: int = Field(gt=0, le=MAX_ITEM_QUANTITY)


class OrderRequest(BaseModel):
    customer_username: str = Field(min_length=1, max_length=128)
    customer_name: str = Field(default=UNKNOWN, max_length=256)
    customer_address: str = Field(default=UNKNOWN, max_length=512)
    customer_email: str = Field(default=UNKNOWN_EMAIL, max_length=256)
    customer_phone: str = Field(default=UNKNOWN, max_length=64)
    items: list[OrderItemRequest] = Field(default_factory=list)
    delivery_date: datetime | None = None


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    order_id: uuid.UUID
    product_id: str
    quantity: int
    unit_price: Decimal


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    customer_username: str
    customer_name: str
    customer_address: str
    customer_email: str
    customer_phone: str
    items: list[OrderItemResponse]
    delivery_date: datetime
    total_price: Decimal
    status: OrderStatus
    created_at: datetime
