"""
order_orchestrator.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Locate the collaborator services (identity, catalog, cart, notifier).
- Bound every outbound call with explicit timeouts.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ORDERS_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "order-service"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8081

    # Auth (inbound bearer tokens and outbound service tokens share one issuer)
    jwt_alg: str = "HS256"
    jwt_issuer: str = "order-service"
    jwt_audience: str = "shop-api"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./orders.db"

    # Collaborators
    identity_base_url: str = "http://user-service:8083"
    catalog_base_url: str = "http://product-service:8082"
    cart_base_url: str = "http://cart-service:8084"
    notifier_base_url: str = "http://notification-service:8085"

    # No retries are performed; these bound how long a single call may block.
    collaborator_timeout_seconds: float = Field(default=5.0, gt=0)
    collaborator_connect_timeout_seconds: float = Field(default=2.0, gt=0)

    # Orders
    min_delivery_lead_days: int = Field(default=2, ge=0)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Every other module receives a Settings instance explicitly; only the API
# composition root calls `get_settings()`.
