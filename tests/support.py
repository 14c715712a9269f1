"""
tests.support

In-process collaborator fakes implementing the capability Protocols, plus request
and row-count helpers shared by the test modules.

Each fake records its calls and can be told which operations (or products) fail
with a `RemoteError`.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from order_orchestrator.collaborators.protocols import (
    ConfirmationLine,
    CustomerProfile,
    ServiceClients,
)
from order_orchestrator.db.models import Order, OrderItem
from order_orchestrator.errors import RemoteError
from order_orchestrator.schemas import OrderItemRequest, OrderRequest

# Naive UTC, like every timestamp the service stores.
FIXED_NOW = datetime(2026, 3, 2, 9, 30, 0)
EARLIEST_DELIVERY = FIXED_NOW + timedelta(days=2)


def _boom(service: str, operation: str) -> RemoteError:
    return RemoteError(
        f"{service} {operation} failed with HTTP 503",
        service=service,
        operation=operation,
        status_code=503,
    )


class FakeIdentity:
    def __init__(
        self,
        *,
        allowed: bool | None = True,
        email: str | None = "alice@example.com",
        failing: Iterable[str] = (),
    ) -> None:
        self.allowed = allowed
        self.email = email
        self.failing = set(failing)
        self.calls: list[tuple[str, str]] = []
        self.profiles: list[CustomerProfile] = []

    async def verify_permission(self, username: str) -> bool:
        self.calls.append(("verify_permission", username))
        if "verify_permission" in self.failing:
            raise _boom("identity", "verify_permission")
        return bool(self.allowed)

    async def upsert_customer_profile(self, profile: CustomerProfile) -> None:
        self.calls.append(("upsert_profile", profile.username))
        if "upsert_profile" in self.failing:
            raise _boom("identity", "upsert_profile")
        self.profiles.append(profile)

    async def get_user_email(self, username: str) -> str | None:
        self.calls.append(("get_user_email", username))
        if "get_user_email" in self.failing:
            raise _boom("identity", "get_user_email")
        return self.email


class FakeCatalog:
    def __init__(
        self,
        *,
        prices: dict[str, Decimal],
        stock: dict[str, int],
        failing_decrements: Iterable[str] = (),
        failing_restores: Iterable[str] = (),
    ) -> None:
        self.prices = dict(prices)
        self.stock = dict(stock)
        self.failing_decrements = set(failing_decrements)
        self.failing_restores = set(failing_restores)
        self.price_lookups: list[str] = []
        self.availability_checks: list[tuple[str, int]] = []
        self.decrements: list[tuple[str, int]] = []
        self.restores: list[tuple[str, int]] = []

    async def get_product_price(self, product_id: str) -> Decimal | None:
        self.price_lookups.append(product_id)
        return self.prices.get(product_id)

    async def check_availability(self, product_id: str, quantity: int) -> bool:
        self.availability_checks.append((product_id, quantity))
        return self.stock.get(product_id, 0) >= quantity

    async def decrement_inventory(self, product_id: str, quantity: int) -> None:
        if product_id in self.failing_decrements:
            raise _boom("catalog", "decrement_inventory")
        self.stock[product_id] -= quantity
        self.decrements.append((product_id, quantity))

    async def restore_inventory(self, product_id: str, quantity: int) -> None:
        if product_id in self.failing_restores:
            raise _boom("catalog", "restore_inventory")
        self.stock[product_id] += quantity
        self.restores.append((product_id, quantity))


class FakeCart:
    def __init__(self, *, failing_products: Iterable[str] = ()) -> None:
        self.failing_products = set(failing_products)
        self.removed: list[tuple[str, str]] = []

    async def remove_cart_item(self, username: str, product_id: str) -> None:
        if product_id in self.failing_products:
            raise _boom("cart", "remove_cart_item")
        self.removed.append((username, product_id))


class FakeNotifier:
    def __init__(self, *, failing: bool = False) -> None:
        self.failing = failing
        self.attempts = 0
        self.sent: list[dict[str, object]] = []

    async def send_confirmation(
        self,
        *,
        email: str,
        order_id: uuid.UUID,
        status: str,
        items: Sequence[ConfirmationLine],
        total_price: Decimal,
    ) -> None:
        self.attempts += 1
        if self.failing:
            raise _boom("notifier", "send_confirmation")
        self.sent.append(
            {
                "email": email,
                "order_id": order_id,
                "status": status,
                "items": list(items),
                "total_price": total_price,
            }
        )


class Collaborators:
    """Fakes plus the `ServiceClients` bundle built from them."""

    def __init__(
        self,
        *,
        identity: FakeIdentity | None = None,
        catalog: FakeCatalog | None = None,
        cart: FakeCart | None = None,
        notifier: FakeNotifier | None = None,
    ) -> None:
        self.identity = identity or FakeIdentity()
        self.catalog = catalog or FakeCatalog(
            prices={"A": Decimal("10.50"), "B": Decimal("5.00")},
            stock={"A": 10, "B": 10},
        )
        self.cart = cart or FakeCart()
        self.notifier = notifier or FakeNotifier()

    @property
    def clients(self) -> ServiceClients:
        return ServiceClients(
            identity=self.identity,
            catalog=self.catalog,
            cart=self.cart,
            notifier=self.notifier,
        )


def order_request(
    *items: tuple[str, int],
    username: str = "alice",
    delivery_date: datetime | None = EARLIEST_DELIVERY + timedelta(days=1),
    **customer: str,
) -> OrderRequest:
    return OrderRequest(
        customer_username=username,
        items=[OrderItemRequest(product_id=p, quantity=q) for p, q in items],
        delivery_date=delivery_date,
        **customer,
    )


async def count_rows(session: AsyncSession) -> tuple[int, int]:
    orders = await session.scalar(select(func.count()).select_from(Order))
    items = await session.scalar(select(func.count()).select_from(OrderItem))
    return int(orders or 0), int(items or 0)
