"""
order_orchestrator.auth

Authentication/authorization package.

Responsibilities:
- JWT helpers for inbound bearer tokens and outbound service tokens.
- FastAPI auth dependencies (Principal + RBAC).
"""

# Package marker.
