"""
order_orchestrator.collaborators

Client boundary toward the services an order touches (identity, catalog, cart, notifier).

Responsibilities:
- Define the capability sets the orchestrator depends on (`protocols`).
- Provide HTTP implementations of those capabilities (`http_clients`).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The orchestrator depends on the Protocols only; it never imports httpx.
