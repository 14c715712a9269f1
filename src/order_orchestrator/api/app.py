"""
order_orchestrator.api.app

FastAPI app factory for the order service.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Initialize and dispose shared infrastructure (DB engine, collaborator HTTP client)
  inside the app lifespan.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from order_orchestrator.api.errors import register_error_handlers
from order_orchestrator.api.routers.dev_auth import router as dev_auth_router
from order_orchestrator.api.routers.health import router as health_router
from order_orchestrator.api.routers.orders import router as orders_router
from order_orchestrator.collaborators.http_clients import (
    build_http_client,
    build_service_clients,
)
from order_orchestrator.db.init_db import init_db
from order_orchestrator.db.session import create_engine, create_sessionmaker
from order_orchestrator.observability.logging import configure_logging, get_logger
from order_orchestrator.observability.middleware import RequestContextMiddleware
from order_orchestrator.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        # One pooled client for all collaborators; clients built on it are stateless.
        http = build_http_client(settings)
        app.state.http = http
        app.state.clients = build_service_clients(settings=settings, http=http)
        try:
            if settings.env in ("dev", "test"):
                await init_db(engine)
            yield
        finally:
            await http.aclose()
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Order Service",
        version="0.1.0",
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(RequestContextMiddleware)
    register_error_handlers(app)
    app.include_router(health_router, tags=["health"])
    app.include_router(dev_auth_router)
    app.include_router(orders_router)

    return app
