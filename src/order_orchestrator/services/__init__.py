"""
order_orchestrator.services

Service-layer package.

Responsibilities:
- Own transaction boundaries and persistence decisions.
- Run the placement graph and expose the order facade.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services are pure Python and testable with fake collaborators and an in-memory DB.
