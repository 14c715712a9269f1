"""
order_orchestrator.db.init_db

DB initialization helpers (dev/test convenience).
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from order_orchestrator.db import models  # noqa: F401  # register tables on Base.metadata
from order_orchestrator.db.base import Base


async def init_db(engine: AsyncEngine) -> None:
    """
    Create the orders schema if it does not exist. Production runs Alembic instead.
    """

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
