"""
order_orchestrator.collaborators.http_clients

HTTP implementations of the collaborator capability sets.

Responsibilities:
- Attach a short-lived service JWT and the current request id to every call.
- Map each capability onto the collaborator's REST route.
- Collapse transport failures, timeouts and non-2xx answers into `RemoteError`,
  keeping the httpx exception as the cause.

Timeouts come from the shared `httpx.AsyncClient` (see `build_http_client`).
Nothing here retries: decrement and notification are not idempotent downstream.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from decimal import Decimal
from typing import Any
from urllib.parse import quote

import httpx

from order_orchestrator.auth.jwt import JwtConfig, issue_service_token
from order_orchestrator.collaborators.protocols import (
    ConfirmationLine,
    CustomerProfile,
    ServiceClients,
)
from order_orchestrator.errors import RemoteError
from order_orchestrator.money import to_money
from order_orchestrator.observability.logging import current_request_id, get_logger
from order_orchestrator.observability.middleware import REQUEST_ID_HEADER
from order_orchestrator.settings import Settings

log = get_logger(__name__)


def build_http_client(settings: Settings) -> httpx.AsyncClient:
    timeout = httpx.Timeout(
        settings.collaborator_timeout_seconds,
        connect=settings.collaborator_connect_timeout_seconds,
    )
    return httpx.AsyncClient(timeout=timeout)


def build_service_clients(*, settings: Settings, http: httpx.AsyncClient) -> ServiceClients:
    return ServiceClients(
        identity=IdentityClient(settings=settings, http=http, base_url=settings.identity_base_url),
        catalog=CatalogClient(settings=settings, http=http, base_url=settings.catalog_base_url),
        cart=CartClient(settings=settings, http=http, base_url=settings.cart_base_url),
        notifier=NotifierClient(settings=settings, http=http, base_url=settings.notifier_base_url),
    )


def _seg(value: str) -> str:
    return quote(value, safe="")


class _ServiceHttpClient:
    service = "collaborator"

    def __init__(self, *, settings: Settings, http: httpx.AsyncClient, base_url: str) -> None:
        self._settings = settings
        self._http = http
        self._base_url = base_url.rstrip("/")

    def _headers(self) -> dict[str, str]:
        token = issue_service_token(
            cfg=JwtConfig.from_settings(self._settings),
            service_name=self._settings.service_name,
        )
        headers = {"Authorization": f"Bearer {token}"}
        request_id = current_request_id()
        if request_id:
            headers[REQUEST_ID_HEADER] = request_id
        return headers

    async def _call(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        absent_on_404: bool = False,
    ) -> httpx.Response | None:
        url = f"{self._base_url}{path}"
        log.debug("collaborator.call", service=self.service, operation=operation, url=url)
        try:
            r = await self._http.request(
                method, url, params=params, json=json, headers=self._headers()
            )
        except httpx.TimeoutException as e:
            raise RemoteError(
                f"{self.service} {operation} timed out",
                service=self.service,
                operation=operation,
            ) from e
        except httpx.RequestError as e:
            raise RemoteError(
                f"{self.service} unreachable during {operation}: {e}",
                service=self.service,
                operation=operation,
            ) from e

        if absent_on_404 and r.status_code == httpx.codes.NOT_FOUND:
            return None
        try:
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RemoteError(
                f"{self.service} {operation} failed with HTTP {r.status_code}",
                service=self.service,
                operation=operation,
                status_code=r.status_code,
            ) from e
        return r

    def _body(self, r: httpx.Response, operation: str) -> Any:
        try:
            return r.json()
        except ValueError as e:
            raise RemoteError(
                f"{self.service} {operation} returned a non-JSON body",
                service=self.service,
                operation=operation,
                status_code=r.status_code,
            ) from e

    def _malformed(self, operation: str, body: Any) -> RemoteError:
        return RemoteError(
            f"{self.service} {operation} returned an unexpected body: {body!r}",
            service=self.service,
            operation=operation,
        )


class IdentityClient(_ServiceHttpClient):
    service = "identity"

    async def verify_permission(self, username: str) -> bool:
        r = await self._call("verify_permission", "GET", f"/api/users/{_seg(username)}/permission")
        # Anything but a literal JSON `true` (false, null, empty) is a denial.
        return self._body(r, "verify_permission") is True

    async def upsert_customer_profile(self, profile: CustomerProfile) -> None:
        await self._call(
            "upsert_profile",
            "POST",
            f"/api/users/{_seg(profile.username)}/info",
            json={
                "name": profile.name,
                "address": profile.address,
                "email": profile.email,
                "phone": profile.phone,
            },
        )

    async def get_user_email(self, username: str) -> str | None:
        r = await self._call(
            "get_user_email", "GET", f"/api/users/{_seg(username)}", absent_on_404=True
        )
        if r is None:
            return None
        body = self._body(r, "get_user_email")
        if not isinstance(body, dict):
            return None
        email = body.get("email")
        return str(email) if email else None


class CatalogClient(_ServiceHttpClient):
    service = "catalog"

    async def get_product_price(self, product_id: str) -> Decimal | None:
        r = await self._call(
            "get_price", "GET", f"/api/products/{_seg(product_id)}", absent_on_404=True
        )
        if r is None:
            return None
        body = self._body(r, "get_price")
        if not isinstance(body, dict) or body.get("price") is None:
            raise self._malformed("get_price", body)
        try:
            return to_money(body["price"])
        except ValueError as e:
            raise self._malformed("get_price", body) from e

    async def check_availability(self, product_id: str, quantity: int) -> bool:
        r = await self._call(
            "check_availability",
            "GET",
            "/api/products/check",
            params={"productId": product_id, "quantity": quantity},
        )
        body = self._body(r, "check_availability")
        if not isinstance(body, dict) or body.get("isAvailable") is None:
            raise self._malformed("check_availability", body)
        return body["isAvailable"] is True

    async def decrement_inventory(self, product_id: str, quantity: int) -> None:
        await self._call(
            "decrement_inventory",
            "PUT",
            f"/api/products/{_seg(product_id)}/updateQuantity",
            params={"quantity": quantity},
        )

    async def restore_inventory(self, product_id: str, quantity: int) -> None:
        await self._call(
            "restore_inventory",
            "PUT",
            f"/api/products/{_seg(product_id)}/restoreQuantity",
            params={"quantity": quantity},
        )


class CartClient(_ServiceHttpClient):
    service = "cart"

    async def remove_cart_item(self, username: str, product_id: str) -> None:
        await self._call(
            "remove_cart_item",
            "DELETE",
            f"/api/cart/{_seg(username)}/items/{_seg(product_id)}",
        )


class NotifierClient(_ServiceHttpClient):
    service = "notifier"

    async def send_confirmation(
        self,
        *,
        email: str,
        order_id: uuid.UUID,
        status: str,
        items: Sequence[ConfirmationLine],
        total_price: Decimal,
    ) -> None:
        await self._call(
            "send_confirmation",
            "POST",
            "/api/notifications/email",
            json={
                "email": email,
                "orderId": str(order_id),
                "status": status,
                "items": [line.to_payload() for line in items],
                "totalPrice": str(total_price),
            },
        )


# --- Module Notes -----------------------------------------------------------
# In production, mTLS or an RS256/JWKS issuer would replace the shared HS256 secret.
