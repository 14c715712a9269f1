"""
order_orchestrator.db.repositories

Repository package.
"""

# Package marker; repositories are imported directly from submodules.


# --- Module Notes -----------------------------------------------------------
# Repositories only flush; commits belong to `services.order_store.OrderRecordStore`.
