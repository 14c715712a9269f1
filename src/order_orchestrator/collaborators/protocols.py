"""
order_orchestrator.collaborators.protocols

Capability sets the placement workflow needs from its collaborators.

Every method either returns its documented result or raises `RemoteError`.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class CustomerProfile:
    username: str
    name: str
    address: str
    email: str
    phone: str


@dataclass(frozen=True, slots=True)
class ConfirmationLine:
    product_id: str
    quantity: int
    unit_price: Decimal

    def to_payload(self) -> dict[str, Any]:
        return {
            "productId": self.product_id,
            "quantity": self.quantity,
            "unitPrice": str(self.unit_price),
        }


class IdentityService(Protocol):
    async def verify_permission(self, username: str) -> bool: ...

    async def upsert_customer_profile(self, profile: CustomerProfile) -> None: ...

    async def get_user_email(self, username: str) -> str | None: ...


class CatalogService(Protocol):
    async def get_product_price(self, product_id: str) -> Decimal | None:
        """Current unit price, or None when the catalog does not know the product."""
        ...

    async def check_availability(self, product_id: str, quantity: int) -> bool: ...

    async def decrement_inventory(self, product_id: str, quantity: int) -> None: ...

    async def restore_inventory(self, product_id: str, quantity: int) -> None:
        """Compensating action for a prior `decrement_inventory`."""
        ...


class CartService(Protocol):
    async def remove_cart_item(self, username: str, product_id: str) -> None: ...


class NotifierService(Protocol):
    async def send_confirmation(
        self,
        *,
        email: str,
        order_id: uuid.UUID,
        status: str,
        items: Sequence[ConfirmationLine],
        total_price: Decimal,
    ) -> None: ...


@dataclass(frozen=True, slots=True)
class ServiceClients:
    identity: IdentityService
    catalog: CatalogService
    cart: CartService
    notifier: NotifierService
