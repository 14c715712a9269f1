"""
tests.test_api

HTTP surface: routing, auth, ownership and error-to-status translation.
Collaborators are replaced by the in-process fakes after startup.
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError
from support import Collaborators

from order_orchestrator.api.app import create_app
from order_orchestrator.api.deps import settings_dep
from order_orchestrator.auth.jwt import JwtConfig, issue_token
from order_orchestrator.db.repositories.orders import OrderRepo
from order_orchestrator.errors import RemoteError
from order_orchestrator.settings import Settings, get_settings


class Api:
    def __init__(self, client: httpx.AsyncClient, settings: Settings, collab: Collaborators):
        self.client = client
        self.settings = settings
        self.collab = collab

    def auth(self, subject: str = "alice", roles: list[str] | None = None) -> dict[str, str]:
        token = issue_token(
            cfg=JwtConfig.from_settings(self.settings),
            subject=subject,
            roles=roles if roles is not None else ["customer"],
        )
        return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def api(tmp_path) -> AsyncIterator[Api]:
    settings = Settings(env="test", database_url=f"sqlite+aiosqlite:///{tmp_path}/orders.db")
    app = create_app(settings=settings)
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[settings_dep] = lambda: settings

    async with app.router.lifespan_context(app):
        collab = Collaborators()
        app.state.clients = collab.clients
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield Api(client, settings, collab)


def _body(*items: tuple[str, int], username: str = "alice", **extra) -> dict:
    delivery = datetime.now(tz=UTC) + timedelta(days=3)
    return {
        "customer_username": username,
        "customer_name": "Alice",
        "items": [{"product_id": p, "quantity": q} for p, q in items],
        "delivery_date": delivery.isoformat(),
        **extra,
    }


@pytest.mark.asyncio
async def test_place_and_fetch_order(api: Api) -> None:
    r = await api.client.post("/v1/orders", json=_body(("A", 3), ("B", 1)), headers=api.auth())
    assert r.status_code == 201, r.text
    placed = r.json()
    assert placed["status"] == "CONFIRMED"
    assert placed["total_price"] == "36.50"
    assert placed["customer_name"] == "Alice"
    assert placed["customer_address"] == "Unknown"
    assert [(i["product_id"], i["quantity"], i["unit_price"]) for i in placed["items"]] == [
        ("A", 3, "10.50"),
        ("B", 1, "5.00"),
    ]
    assert r.headers["x-request-id"]

    r = await api.client.get(f"/v1/orders/{placed['id']}", headers=api.auth())
    assert r.status_code == 200
    fetched = r.json()
    assert fetched["id"] == placed["id"]
    assert fetched["total_price"] == "36.50"
    assert fetched["status"] == "CONFIRMED"


@pytest.mark.asyncio
async def test_request_id_is_echoed(api: Api) -> None:
    r = await api.client.get("/healthz", headers={"x-request-id": "abc-123"})
    assert r.headers["x-request-id"] == "abc-123"


@pytest.mark.asyncio
async def test_unknown_order_is_404(api: Api) -> None:
    r = await api.client.get(f"/v1/orders/{uuid.uuid4()}", headers=api.auth())
    assert r.status_code == 404
    assert r.json()["error"] == "not_found"


@pytest.mark.asyncio
async def test_other_customers_order_looks_missing(api: Api) -> None:
    r = await api.client.post("/v1/orders", json=_body(("A", 1)), headers=api.auth())
    order_id = r.json()["id"]

    r = await api.client.get(f"/v1/orders/{order_id}", headers=api.auth("mallory"))
    assert r.status_code == 404

    r = await api.client.get(f"/v1/orders/{order_id}", headers=api.auth("ops", ["admin"]))
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_cannot_order_for_someone_else(api: Api) -> None:
    r = await api.client.post(
        "/v1/orders", json=_body(("A", 1), username="bob"), headers=api.auth("alice")
    )
    assert r.status_code == 403
    assert api.collab.identity.calls == []


@pytest.mark.asyncio
async def test_missing_token_is_401(api: Api) -> None:
    r = await api.client.post("/v1/orders", json=_body(("A", 1)))
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_empty_order_is_422(api: Api) -> None:
    r = await api.client.post("/v1/orders", json=_body(), headers=api.auth())
    assert r.status_code == 422
    assert r.json()["error"] == "validation_error"
    assert "at least one product" in r.json()["detail"]


@pytest.mark.asyncio
async def test_denied_permission_is_403(api: Api) -> None:
    api.collab.identity.allowed = False
    r = await api.client.post("/v1/orders", json=_body(("A", 1)), headers=api.auth())
    assert r.status_code == 403
    assert r.json()["error"] == "authorization_error"


@pytest.mark.asyncio
async def test_unavailable_item_is_409(api: Api) -> None:
    r = await api.client.post("/v1/orders", json=_body(("A", 50)), headers=api.auth())
    assert r.status_code == 409
    body = r.json()
    assert body["error"] == "availability_error"
    assert body["product_id"] == "A"
    assert body["quantity"] == 50


@pytest.mark.asyncio
async def test_inventory_commit_failure_is_502(api: Api) -> None:
    api.collab.catalog.failing_decrements.add("B")
    r = await api.client.post("/v1/orders", json=_body(("A", 1), ("B", 1)), headers=api.auth())
    assert r.status_code == 502
    body = r.json()
    assert body["error"] == "inventory_commit_error"
    assert body["compensated"] == ["A"]

    r = await api.client.get(f"/v1/orders/{body['order_id']}", headers=api.auth())
    assert r.json()["status"] == "FAILED"


@pytest.mark.asyncio
async def test_dev_token_can_place_orders(api: Api) -> None:
    r = await api.client.post("/v1/dev/token", json={"subject": "alice"})
    assert r.status_code == 200
    token = r.json()["access_token"]

    r = await api.client.post(
        "/v1/orders",
        json=_body(("B", 2)),
        headers={"Authorization": f"Bearer {token}"},
    )
    assert r.status_code == 201
    assert r.json()["total_price"] == "10.00"


@pytest.mark.asyncio
async def test_database_failure_is_503(api: Api, monkeypatch) -> None:
    async def _create(self, **kwargs):
        raise OperationalError("INSERT INTO orders", {}, Exception("disk I/O error"))

    monkeypatch.setattr(OrderRepo, "create", _create)

    r = await api.client.post("/v1/orders", json=_body(("A", 1)), headers=api.auth())
    assert r.status_code == 503
    assert r.json()["error"] == "persistence_error"
    assert api.collab.catalog.decrements == []


@pytest.mark.asyncio
async def test_decrement_timeout_is_flagged_in_the_response(api: Api) -> None:
    async def _stall(product_id: str, quantity: int) -> None:
        raise RemoteError(
            "catalog decrement_inventory timed out",
            service="catalog",
            operation="decrement_inventory",
        )

    api.collab.catalog.decrement_inventory = _stall

    r = await api.client.post("/v1/orders", json=_body(("A", 1)), headers=api.auth())
    assert r.status_code == 502
    assert r.json()["outcome_unknown"] is True
