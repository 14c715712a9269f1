"""
order_orchestrator.services.order_service

Order service facade.

Responsibilities:
- `create_order`: run the placement graph and return the persisted order.
- `get_order_by_id`: read-only lookup that raises `NotFoundError` for unknown ids.
"""

from __future__ import annotations

import uuid
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from order_orchestrator.collaborators.protocols import ServiceClients
from order_orchestrator.db.models import Order, utcnow
from order_orchestrator.errors import NotFoundError, OrderError, PersistenceError
from order_orchestrator.observability.logging import get_logger
from order_orchestrator.orchestrator.graph import build_graph
from order_orchestrator.orchestrator.nodes import Clock
from order_orchestrator.orchestrator.state import OrderState
from order_orchestrator.schemas import OrderRequest
from order_orchestrator.services.order_store import OrderRecordStore
from order_orchestrator.settings import Settings

log = get_logger(__name__)


class OrderService:
    def __init__(
        self,
        *,
        session: AsyncSession,
        clients: ServiceClients,
        settings: Settings,
        clock: Clock = utcnow,
    ) -> None:
        self._store = OrderRecordStore(session)
        self._clients = clients
        self._settings = settings
        self._clock = clock

    async def create_order(self, request: OrderRequest) -> Order:
        graph = build_graph(
            clients=self._clients,
            store=self._store,
            clock=self._clock,
            min_delivery_lead=timedelta(days=self._settings.min_delivery_lead_days),
        )
        initial: OrderState = {"request": request, "phase": "received", "side_effects": []}

        try:
            final: OrderState = await graph.ainvoke(initial)
        except OrderError as e:
            log.warning(
                "order.aborted",
                customer=request.customer_username,
                error=e.code,
                detail=e.message,
                **e.context(),
            )
            raise

        order_id = final["order_id"]
        order = await self._store.get(order_id)
        if order is None:
            raise PersistenceError(f"Order {order_id} missing after confirmation")

        failed_steps = [o["step"] for o in final.get("side_effects", []) if not o["ok"]]
        log.info(
            "order.placed",
            order_id=str(order.id),
            status=order.status.value,
            total_price=str(order.total_price),
            failed_side_effects=failed_steps,
        )
        return order

    async def get_order_by_id(self, order_id: uuid.UUID) -> Order:
        order = await self._store.get(order_id)
        if order is None:
            log.info("order.not_found", order_id=str(order_id))
            raise NotFoundError(order_id)
        return order


# --- Module Notes -----------------------------------------------------------
# The graph is compiled per call because it closes over this request's session.
# Collaborator clients are stateless and shared across requests.
