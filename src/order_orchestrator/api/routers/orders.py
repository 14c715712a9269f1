"""
order_orchestrator.api.routers.orders

Customer-facing order endpoints.

Responsibilities:
- Place an order for the authenticated customer.
- Look up an order by id (owner or admin only).
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException
from starlette.status import HTTP_201_CREATED, HTTP_403_FORBIDDEN

from order_orchestrator.api.deps import order_service
from order_orchestrator.auth.deps import require_roles
from order_orchestrator.auth.models import Principal
from order_orchestrator.errors import NotFoundError
from order_orchestrator.schemas import OrderRequest, OrderResponse
from order_orchestrator.services.order_service import OrderService

router = APIRouter(prefix="/v1/orders", tags=["orders"])


@router.post("", response_model=OrderResponse, status_code=HTTP_201_CREATED)
async def create_order(
    body: OrderRequest,
    principal: Principal = Depends(require_roles("customer")),
    svc: OrderService = Depends(order_service),
) -> OrderResponse:
    if not principal.owns(body.customer_username):
        raise HTTPException(
            status_code=HTTP_403_FORBIDDEN, detail="Cannot place orders for another customer"
        )
    order = await svc.create_order(body)
    return OrderResponse.model_validate(order)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: uuid.UUID,
    principal: Principal = Depends(require_roles("customer")),
    svc: OrderService = Depends(order_service),
) -> OrderResponse:
    order = await svc.get_order_by_id(order_id)
    if not principal.owns(order.customer_username):
        # Same answer as a missing order so ids of other customers are not confirmed.
        raise NotFoundError(order_id)
    return OrderResponse.model_validate(order)
