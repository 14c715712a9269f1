"""
order_orchestrator.auth.models

Auth domain models.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity. For customers, `subject` is the username that
    orders are placed and looked up under.
    """

    subject: str
    roles: frozenset[str]

    @property
    def is_admin(self) -> bool:
        return "admin" in self.roles

    def owns(self, username: str) -> bool:
        return self.is_admin or self.subject == username
