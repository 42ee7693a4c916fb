"""Mapping of domain failures to HTTP error responses.

One table serves every endpoint: the status code of a failure kind never
depends on the route that raised it.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.logging import REQUEST_ID_HEADER, bind_request_id, reset_request_id
from app.infrastructure.database.transaction import TransactionError
from app.modules.wallets.exceptions import (
    InsufficientFundsError,
    InvalidAmountError,
    InvalidOperationTypeError,
    InvalidWalletIdError,
    OperationTypeNotSpecifiedError,
    WalletError,
    WalletNotFoundError,
)
from app.schemas import ErrorResponse

logger = logging.getLogger(__name__)


class RequestBodyTooLargeError(Exception):
    """Raised while reading a request body that outgrows the configured limit."""


INVALID_BODY_ERROR = ("BAD_REQUEST", "invalid request body")

ERROR_TABLE: dict[type[Exception], tuple[int, str, str]] = {
    WalletNotFoundError: (status.HTTP_404_NOT_FOUND, "NOT_FOUND", "wallet not found"),
    InsufficientFundsError: (status.HTTP_409_CONFLICT, "CONFLICT", "insufficient funds"),
    InvalidOperationTypeError: (status.HTTP_400_BAD_REQUEST, "BAD_REQUEST", "invalid operation type"),
    OperationTypeNotSpecifiedError: (status.HTTP_400_BAD_REQUEST, "BAD_REQUEST", "type operation not specified"),
    InvalidAmountError: (status.HTTP_400_BAD_REQUEST, "BAD_REQUEST", "invalid amount"),
    InvalidWalletIdError: (status.HTTP_400_BAD_REQUEST, "BAD_REQUEST", "invalid wallet id"),
    RequestBodyTooLargeError: (status.HTTP_400_BAD_REQUEST, *INVALID_BODY_ERROR),
}

INTERNAL_ERROR = (status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL", "Internal server error")

# framework-raised errors: unknown routes, wrong methods, unreadable bodies
HTTP_STATUS_ERRORS: dict[int, tuple[str, str]] = {
    status.HTTP_400_BAD_REQUEST: INVALID_BODY_ERROR,
    status.HTTP_404_NOT_FOUND: ("NOT_FOUND", "not found"),
    status.HTTP_405_METHOD_NOT_ALLOWED: ("METHOD_NOT_ALLOWED", "method not allowed"),
}


def resolve_error(exc: BaseException) -> tuple[int, str, str]:
    for exc_type, entry in ERROR_TABLE.items():
        if isinstance(exc, exc_type):
            return entry
    return INTERNAL_ERROR


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    body = ErrorResponse(code=code, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def handle_error(request: Request, exc: Exception) -> JSONResponse:
    status_code, code, message = resolve_error(exc)
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed", request.method, request.url.path, exc_info=exc)
    else:
        logger.warning("%s %s rejected: %s: %s", request.method, request.url.path, type(exc).__name__, exc)
    return error_response(status_code, code, message)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler; runs outside the middleware stack."""
    request_id = getattr(request.state, "request_id", None)
    token = bind_request_id(request_id) if request_id else None
    try:
        response = await handle_error(request, exc)
    finally:
        if token is not None:
            reset_request_id(token)
    if request_id:
        response.headers[REQUEST_ID_HEADER] = request_id
    return response


async def handle_invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("%s %s invalid body: %s", request.method, request.url.path, exc.errors())
    return error_response(status.HTTP_400_BAD_REQUEST, *INVALID_BODY_ERROR)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code, message = HTTP_STATUS_ERRORS.get(exc.status_code, ("HTTP_ERROR", str(exc.detail)))
    logger.warning("%s %s rejected: %s %s", request.method, request.url.path, exc.status_code, exc.detail)
    response = error_response(exc.status_code, code, message)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, handle_invalid_body)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestBodyTooLargeError, handle_error)
    app.add_exception_handler(WalletError, handle_error)
    app.add_exception_handler(TransactionError, handle_error)
    app.add_exception_handler(SQLAlchemyError, handle_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


__all__ = [
    "ERROR_TABLE",
    "INVALID_BODY_ERROR",
    "RequestBodyTooLargeError",
    "error_response",
    "register_exception_handlers",
    "resolve_error",
]
