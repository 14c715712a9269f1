from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import timedelta
from typing import Any

from langgraph.graph import END, StateGraph

from order_orchestrator.collaborators.protocols import ServiceClients
from order_orchestrator.orchestrator.nodes import (
    Clock,
    clear_cart_node,
    commit_inventory_node,
    confirm_node,
    notify_customer_node,
    persist_order_node,
    price_items_node,
    upsert_profile_node,
    validate_node,
    verify_identity_node,
)
from order_orchestrator.orchestrator.state import OrderState
from order_orchestrator.services.order_store import OrderRecordStore

CRITICAL_PATH = (
    "validate",
    "verify_identity",
    "price_items",
    "persist_order",
    "commit_inventory",
    "confirm",
)
BEST_EFFORT = ("upsert_profile", "clear_cart", "notify_customer")


def build_graph(
    *,
    clients: ServiceClients,
    store: OrderRecordStore,
    clock: Clock,
    min_delivery_lead: timedelta,
):
    """
    Returns a compiled LangGraph runnable for one order placement.

    The critical path is a straight line; after `confirm` the best-effort steps
    branch out in parallel and each ends the graph on its own.
    """

    graph = StateGraph(OrderState)

    graph.add_node("validate", _bind(validate_node, clock=clock, min_lead=min_delivery_lead))
    graph.add_node("verify_identity", _bind(verify_identity_node, identity=clients.identity))
    graph.add_node("price_items", _bind(price_items_node, catalog=clients.catalog))
    graph.add_node("persist_order", _bind(persist_order_node, store=store, clock=clock))
    graph.add_node(
        "commit_inventory", _bind(commit_inventory_node, catalog=clients.catalog, store=store)
    )
    graph.add_node("confirm", _bind(confirm_node, store=store))

    graph.add_node("upsert_profile", _bind(upsert_profile_node, identity=clients.identity))
    graph.add_node("clear_cart", _bind(clear_cart_node, cart=clients.cart))
    graph.add_node(
        "notify_customer",
        _bind(notify_customer_node, identity=clients.identity, notifier=clients.notifier),
    )

    graph.set_entry_point(CRITICAL_PATH[0])
    for src, dst in zip(CRITICAL_PATH, CRITICAL_PATH[1:]):
        graph.add_edge(src, dst)

    for step in BEST_EFFORT:
        graph.add_edge(CRITICAL_PATH[-1], step)
        graph.add_edge(step, END)

    return graph.compile()


def _bind(
    fn: Callable[..., Awaitable[OrderState]],
    **deps: Any,
) -> Callable[[OrderState], Awaitable[OrderState]]:
    async def _wrapped(state: OrderState) -> OrderState:
        return await fn(state, **deps)

    return _wrapped
