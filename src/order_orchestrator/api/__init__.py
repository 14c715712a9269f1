"""
order_orchestrator.api

API package for the order service.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring and error translation.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer stays thin: request validation + auth + delegation to OrderService.
