from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from order_orchestrator.collaborators.protocols import (
    CartService,
    CatalogService,
    ConfirmationLine,
    CustomerProfile,
    IdentityService,
    NotifierService,
)
from order_orchestrator.db.models import OrderStatus
from order_orchestrator.errors import (
    AuthorizationError,
    AvailabilityError,
    InventoryCommitError,
    PersistenceError,
    RemoteError,
    ValidationError,
)
from order_orchestrator.money import sum_money, to_money
from order_orchestrator.observability.logging import get_logger
from order_orchestrator.orchestrator.state import OrderState, PricedItem
from order_orchestrator.services.order_store import OrderRecordStore

log = get_logger(__name__)

Clock = Callable[[], datetime]


def as_naive_utc(value: datetime) -> datetime:
    # Naive values are taken to be UTC already.
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


# --- Critical path ----------------------------------------------------------


async def validate_node(state: OrderState, *, clock: Clock, min_lead: timedelta) -> OrderState:
    """
    Pure checks, no I/O: at least one item, and a delivery date no earlier than
    `now + min_lead`. The boundary itself is accepted.
    """

    request = state["request"]
    if not request.items:
        log.warning("order.rejected", reason="no_items", customer=request.customer_username)
        raise ValidationError("Order must contain at least one product")
    if request.delivery_date is None:
        log.warning("order.rejected", reason="no_delivery_date", customer=request.customer_username)
        raise ValidationError("Delivery date is required")

    delivery_date = as_naive_utc(request.delivery_date)
    earliest = clock() + min_lead
    if delivery_date < earliest:
        log.warning(
            "order.rejected",
            reason="delivery_too_soon",
            delivery_date=delivery_date.isoformat(),
            earliest=earliest.isoformat(),
        )
        raise ValidationError(
            f"Delivery date must be at least {min_lead.days} days in the future"
        )

    log.info("order.validated", customer=request.customer_username, items=len(request.items))
    return {"delivery_date": delivery_date, "phase": "validated"}


async def verify_identity_node(state: OrderState, *, identity: IdentityService) -> OrderState:
    username = state["request"].customer_username
    if not await identity.verify_permission(username):
        log.warning("order.rejected", reason="permission_denied", customer=username)
        raise AuthorizationError("Invalid account or insufficient permissions")
    return {"phase": "identity_verified"}


async def price_items_node(state: OrderState, *, catalog: CatalogService) -> OrderState:
    """
    Snapshot each item's unit price and check stock, in request order.

    The first unknown or unavailable product aborts the whole order. Nothing is
    persisted here, so earlier priced items leave no trace.
    """

    priced: list[PricedItem] = []
    for item in state["request"].items:
        price = await catalog.get_product_price(item.product_id)
        if price is None:
            log.warning("order.rejected", reason="unknown_product", product_id=item.product_id)
            raise ValidationError(f"Product does not exist: {item.product_id}")
        priced.append(
            PricedItem(product_id=item.product_id, quantity=item.quantity, unit_price=to_money(price))
        )

        if not await catalog.check_availability(item.product_id, item.quantity):
            log.warning(
                "order.rejected",
                reason="insufficient_stock",
                product_id=item.product_id,
                quantity=item.quantity,
            )
            raise AvailabilityError(product_id=item.product_id, quantity=item.quantity)

    total = sum_money(p.line_total for p in priced)
    log.info("order.priced", items=len(priced), total_price=str(total))
    return {"priced_items": priced, "total_price": total, "phase": "priced"}


async def persist_order_node(
    state: OrderState, *, store: OrderRecordStore, clock: Clock
) -> OrderState:
    priced = state["priced_items"]
    order_id = await store.create_processing(
        request=state["request"],
        delivery_date=state["delivery_date"],
        total_price=state["total_price"],
        created_at=clock(),
        items=[(p.product_id, p.quantity, p.unit_price) for p in priced],
    )
    log.info("order.persisted", order_id=str(order_id), status=OrderStatus.processing.value)
    return {"order_id": order_id, "status": OrderStatus.processing.value, "phase": "persisted"}


async def commit_inventory_node(
    state: OrderState, *, catalog: CatalogService, store: OrderRecordStore
) -> OrderState:
    """
    Decrement stock item by item. On the first failure, re-increment what was
    already decremented (newest first), move the order to FAILED and raise.

    Check (`price_items`) and decrement are separate round-trips, so two concurrent
    orders for the last unit can both pass the check. That oversell window is not
    closed here.
    """

    order_id = state["order_id"]
    applied: list[PricedItem] = []
    for item in state["priced_items"]:
        try:
            await catalog.decrement_inventory(item.product_id, item.quantity)
        except RemoteError as e:
            log.error(
                "order.inventory_commit_failed",
                order_id=str(order_id),
                product_id=item.product_id,
                error=e.message,
                outcome_unknown=e.status_code is None,
            )
            compensated, uncompensated = await _compensate(
                catalog, applied=applied, order_id=order_id
            )
            try:
                await store.mark(order_id, OrderStatus.failed)
            except PersistenceError:
                log.error(
                    "order.needs_reconciliation",
                    order_id=str(order_id),
                    status=OrderStatus.processing.value,
                    exc_info=True,
                )
            raise InventoryCommitError(
                order_id=order_id,
                product_id=item.product_id,
                compensated=compensated,
                uncompensated=uncompensated,
                cause=e,
            ) from e
        applied.append(item)

    log.info("order.inventory_committed", order_id=str(order_id), items=len(applied))
    return {"phase": "inventory_committed"}


async def _compensate(
    catalog: CatalogService, *, applied: list[PricedItem], order_id: Any
) -> tuple[list[str], list[str]]:
    compensated: list[str] = []
    uncompensated: list[str] = []
    for item in reversed(applied):
        try:
            await catalog.restore_inventory(item.product_id, item.quantity)
        except RemoteError as e:
            log.error(
                "order.compensation_failed",
                order_id=str(order_id),
                product_id=item.product_id,
                quantity=item.quantity,
                error=e.message,
            )
            uncompensated.append(item.product_id)
            continue
        compensated.append(item.product_id)
    return compensated, uncompensated


async def confirm_node(state: OrderState, *, store: OrderRecordStore) -> OrderState:
    order_id = state["order_id"]
    await store.mark(order_id, OrderStatus.confirmed)
    log.info("order.confirmed", order_id=str(order_id), total_price=str(state["total_price"]))
    return {"status": OrderStatus.confirmed.value, "phase": "confirmed"}


# --- Best-effort fan-out ----------------------------------------------------
# Each branch owns its failures. Nothing below may raise into the graph.


async def _attempt(
    step: str, order_id: Any, action: Callable[[], Awaitable[None]]
) -> dict[str, Any]:
    try:
        await action()
    except Exception as e:
        log.warning(
            "order.side_effect_failed",
            step=step,
            order_id=str(order_id),
            error=str(e),
            exc_info=True,
        )
        return {"step": step, "ok": False, "error": str(e)}
    log.info("order.side_effect_done", step=step, order_id=str(order_id))
    return {"step": step, "ok": True, "error": None}


async def upsert_profile_node(state: OrderState, *, identity: IdentityService) -> OrderState:
    request = state["request"]
    profile = CustomerProfile(
        username=request.customer_username,
        name=request.customer_name,
        address=request.customer_address,
        email=request.customer_email,
        phone=request.customer_phone,
    )
    outcome = await _attempt(
        "upsert_profile", state["order_id"], lambda: identity.upsert_customer_profile(profile)
    )
    return {"side_effects": [outcome]}


async def clear_cart_node(state: OrderState, *, cart: CartService) -> OrderState:
    username = state["request"].customer_username
    outcomes = []
    for item in state["priced_items"]:
        outcomes.append(
            await _attempt(
                f"remove_cart_item:{item.product_id}",
                state["order_id"],
                lambda pid=item.product_id: cart.remove_cart_item(username, pid),
            )
        )
    return {"side_effects": outcomes}


async def notify_customer_node(
    state: OrderState, *, identity: IdentityService, notifier: NotifierService
) -> OrderState:
    order_id = state["order_id"]
    username = state["request"].customer_username

    async def _notify() -> None:
        email = await identity.get_user_email(username)
        if email is None:
            raise LookupError(f"no email on file for {username}")
        await notifier.send_confirmation(
            email=email,
            order_id=order_id,
            status=state["status"],
            items=[
                ConfirmationLine(
                    product_id=p.product_id, quantity=p.quantity, unit_price=p.unit_price
                )
                for p in state["priced_items"]
            ],
            total_price=state["total_price"],
        )

    return {"side_effects": [await _attempt("notify_customer", order_id, _notify)]}
