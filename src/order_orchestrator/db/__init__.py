"""
order_orchestrator.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and the order repository.
"""

# Package marker.
