"""
tests.conftest

Shared fixtures: an in-memory database, collaborator fakes and a fixed clock.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from datetime import datetime

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool
from support import FIXED_NOW, Collaborators

from order_orchestrator.db.init_db import init_db
from order_orchestrator.db.session import create_sessionmaker
from order_orchestrator.services.order_service import OrderService
from order_orchestrator.settings import Settings


@pytest_asyncio.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    async with create_sessionmaker(engine)() as session:
        yield session


@pytest.fixture
def collaborators() -> Collaborators:
    return Collaborators()


@pytest.fixture
def make_service(
    session: AsyncSession, collaborators: Collaborators
) -> Callable[..., OrderService]:
    def _make(*, clock: Callable[[], datetime] = lambda: FIXED_NOW) -> OrderService:
        return OrderService(
            session=session,
            clients=collaborators.clients,
            settings=Settings(env="test"),
            clock=clock,
        )

    return _make
