"""
order_orchestrator.orchestrator.state

Typed state schema used by the placement graph.

Phases advance `received -> validated -> priced -> persisted -> inventory_committed
-> confirmed`. A critical failure raises out of the graph instead of writing a phase.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, TypedDict

from order_orchestrator.money import line_total
from order_orchestrator.orchestrator.reducers import append_outcomes
from order_orchestrator.schemas import OrderRequest


@dataclass(frozen=True, slots=True)
class PricedItem:
    product_id: str
    quantity: int
    # Snapshot taken from the catalog during pricing; never re-read later.
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return line_total(self.unit_price, self.quantity)


class OrderState(TypedDict, total=False):
    request: OrderRequest
    phase: str

    # validate
    delivery_date: datetime

    # price_items (in memory only until persist_order)
    priced_items: list[PricedItem]
    total_price: Decimal

    # persist_order / confirm
    order_id: uuid.UUID
    status: str

    # best-effort fan-out
    side_effects: Annotated[list[dict[str, Any]], append_outcomes]
