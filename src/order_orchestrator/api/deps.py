"""
order_orchestrator.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, DB sessions and collaborator clients.
- Encapsulate app.state access patterns (engine/sessionmaker/clients).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from order_orchestrator.collaborators.protocols import ServiceClients
from order_orchestrator.services.order_service import OrderService
from order_orchestrator.settings import Settings, get_settings


def settings_dep() -> Settings:
    return get_settings()


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # Created on app startup in `order_orchestrator.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed by OrderRecordStore.
    async with session_factory() as session:
        yield session


def service_clients(request: Request) -> ServiceClients:
    return request.app.state.clients  # type: ignore[attr-defined]


def order_service(
    session: AsyncSession = Depends(db_session),
    clients: ServiceClients = Depends(service_clients),
    settings: Settings = Depends(settings_dep),
) -> OrderService:
    return OrderService(session=session, clients=clients, settings=settings)
