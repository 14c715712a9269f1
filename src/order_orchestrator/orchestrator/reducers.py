"""
order_orchestrator.orchestrator.reducers

Reducers define how LangGraph merges state updates from concurrent branches.
"""

from __future__ import annotations

from typing import Any


def append_outcomes(
    left: list[dict[str, Any]] | None, right: list[dict[str, Any]] | None
) -> list[dict[str, Any]]:
    """
    Append-only reducer for best-effort outcomes.

    The three post-confirmation branches run in the same superstep; each returns
    `{"side_effects": [...]}` and this reducer concatenates them.
    """

    if not left:
        return list(right or [])
    if not right:
        return list(left)
    return [*left, *right]
