"""
order_orchestrator.errors

Error taxonomy for order placement.

Responsibilities:
- Give every failure of the placement workflow a distinguishable type and stable code.
- Carry enough context (product, order id, compensation result) for callers to act.

Critical errors raised before `persist_order` leave no state behind. The one
exception that can follow a persisted row is `InventoryCommitError`.
"""

from __future__ import annotations

import uuid
from typing import Any


class OrderError(Exception):
    code = "order_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def context(self) -> dict[str, Any]:
        return {}


class ValidationError(OrderError):
    code = "validation_error"


class AuthorizationError(OrderError):
    code = "authorization_error"


class AvailabilityError(OrderError):
    code = "availability_error"

    def __init__(self, *, product_id: str, quantity: int) -> None:
        super().__init__(f"Product not available in requested quantity: {product_id}")
        self.product_id = product_id
        self.quantity = quantity

    def context(self) -> dict[str, Any]:
        return {"product_id": self.product_id, "quantity": self.quantity}


class RemoteError(OrderError):
    """
    A collaborator call failed or the collaborator was unreachable.

    The underlying transport/HTTP exception is preserved as `__cause__`.
    """

    code = "remote_error"

    def __init__(
        self,
        message: str,
        *,
        service: str,
        operation: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.service = service
        self.operation = operation
        self.status_code = status_code

    def context(self) -> dict[str, Any]:
        return {
            "service": self.service,
            "operation": self.operation,
            "status_code": self.status_code,
        }


class InventoryCommitError(RemoteError):
    """
    An inventory decrement failed after the order row was written.

    By the time this is raised the orchestrator has re-incremented every product in
    `compensated` and moved the order to FAILED. Products in `uncompensated` could
    not be restored and need manual reconciliation.

    `outcome_unknown` is set when the failing decrement got no HTTP answer (timeout or
    dropped connection). The catalog may have applied it anyway, so `product_id` is
    then part of the reconciliation set too.
    """

    code = "inventory_commit_error"

    def __init__(
        self,
        *,
        order_id: uuid.UUID,
        product_id: str,
        compensated: list[str],
        uncompensated: list[str],
        cause: RemoteError,
    ) -> None:
        super().__init__(
            f"Failed to update product inventory for {product_id}: {cause.message}",
            service=cause.service,
            operation=cause.operation,
            status_code=cause.status_code,
        )
        self.order_id = order_id
        self.product_id = product_id
        self.compensated = compensated
        self.uncompensated = uncompensated
        self.outcome_unknown = cause.status_code is None

    def context(self) -> dict[str, Any]:
        return {
            **super().context(),
            "order_id": str(self.order_id),
            "product_id": self.product_id,
            "compensated": self.compensated,
            "uncompensated": self.uncompensated,
            "outcome_unknown": self.outcome_unknown,
        }


class PersistenceError(OrderError):
    code = "persistence_error"


class NotFoundError(OrderError):
    code = "not_found"

    def __init__(self, order_id: uuid.UUID) -> None:
        super().__init__(f"Order not found with ID: {order_id}")
        self.order_id = order_id

    def context(self) -> dict[str, Any]:
        return {"order_id": str(self.order_id)}
