"""
order_orchestrator.api.routers

Router modules mounted by `api.app.create_app`.
"""

# Package marker.
