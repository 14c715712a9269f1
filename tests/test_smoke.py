"""
tests.test_smoke

Minimal smoke tests to validate the service can boot and serve core endpoints.

Responsibilities:
- Ensure the FastAPI app starts and DB readiness probe works in test mode.
- Ensure the lifespan builds and releases the shared infrastructure.
"""

from __future__ import annotations

import httpx
import pytest

from order_orchestrator.api.app import create_app
from order_orchestrator.settings import Settings


@pytest.mark.asyncio
async def test_health_endpoints(tmp_path) -> None:
    app = create_app(
        settings=Settings(env="test", database_url=f"sqlite+aiosqlite:///{tmp_path}/orders.db")
    )

    # httpx ASGITransport does not manage lifespan automatically; enter it explicitly.
    async with app.router.lifespan_context(app):
        assert app.state.sessionmaker is not None
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            r = await client.get("/healthz")
            assert r.status_code == 200
            assert r.json()["status"] == "ok"

            r = await client.get("/readyz")
            assert r.status_code == 200
            assert r.json()["status"] == "ready"

    assert app.state.http.is_closed
