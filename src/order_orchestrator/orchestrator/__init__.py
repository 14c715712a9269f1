"""
order_orchestrator.orchestrator

Order placement workflow (LangGraph state machine).

Responsibilities:
- Typed state schema, phase nodes, and graph compilation.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Call sites should go through `services.order_service.OrderService`, not the graph.
