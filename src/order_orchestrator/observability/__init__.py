"""
order_orchestrator.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Request context propagation for consistent log enrichment and outbound correlation.
"""

# Package marker.
