"""Error taxonomy and its mapping onto HTTP responses."""
from __future__ import annotations

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


logger = logging.getLogger(__name__)


class TransactionsApiError(Exception):
    """Base exception for input errors reported back to the caller."""
    title = "Bad request"
    status_code = status.HTTP_400_BAD_REQUEST


class ZoneResolutionError(TransactionsApiError):
    """Raised when an IANA zone identifier (stored or caller-supplied) does not resolve."""
    title = "Invalid time zone"


class ValidationError(TransactionsApiError):
    """Raised for missing or inconsistent request parameters."""
    title = "Validation error"


class ParsingError(TransactionsApiError):
    """Raised when an imported CSV row has malformed fields."""
    title = "CSV processing error"


def _error_response(status_code: int, title: str, description: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"title": title, "status": status_code, "description": description},
    )


async def handle_api_error(request: Request, exc: TransactionsApiError) -> JSONResponse:
    logger.warning(f"{exc.title} on {request.method} {request.url.path}: {exc}")
    return _error_response(exc.status_code, exc.title, str(exc))


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    try:
        title = HTTPStatus(exc.status_code).phrase
    except ValueError:
        title = "HTTP error"
    response = _error_response(exc.status_code, title, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        "An unexpected error occurred while processing the request.",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TransactionsApiError, handle_api_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
