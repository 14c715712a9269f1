"""
order_orchestrator.api.errors

Translate the order error taxonomy into HTTP responses.
"""

from __future__ import annotations

from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from order_orchestrator import errors

# Most specific first: InventoryCommitError is a RemoteError.
STATUS_BY_ERROR: tuple[tuple[type[errors.OrderError], HTTPStatus], ...] = (
    (errors.ValidationError, HTTPStatus.UNPROCESSABLE_ENTITY),
    (errors.AuthorizationError, HTTPStatus.FORBIDDEN),
    (errors.AvailabilityError, HTTPStatus.CONFLICT),
    (errors.NotFoundError, HTTPStatus.NOT_FOUND),
    (errors.InventoryCommitError, HTTPStatus.BAD_GATEWAY),
    (errors.RemoteError, HTTPStatus.BAD_GATEWAY),
    (errors.PersistenceError, HTTPStatus.SERVICE_UNAVAILABLE),
)


def status_for(exc: errors.OrderError) -> HTTPStatus:
    for kind, status in STATUS_BY_ERROR:
        if isinstance(exc, kind):
            return status
    return HTTPStatus.INTERNAL_SERVER_ERROR


async def order_error_handler(_: Request, exc: errors.OrderError) -> JSONResponse:
    return JSONResponse(
        status_code=int(status_for(exc)),
        content={"error": exc.code, "detail": exc.message, **exc.context()},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(errors.OrderError, order_error_handler)
