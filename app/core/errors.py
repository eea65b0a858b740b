# app/core/errors.py
"""
Error taxonomy shared by the catalog, the comparison engine and the HTTP layer.

Every failure the service reports on purpose is a CatalogError subclass carrying:
  - kind: InvalidInput | TooMany | NotFound | RateLimited | Internal
  - code: machine-readable code echoed in the error body
  - status_code: HTTP status used by the exception handlers
Callers branch on the class (or `kind`), never on the message text.
"""
from __future__ import annotations

import logging
import traceback
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings

logger = logging.getLogger(__name__)

INTERNAL_MESSAGE = "Internal server error"


class CatalogError(Exception):
    kind: str = "Internal"
    default_code: str = "INTERNAL_ERROR"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class InvalidInput(CatalogError):
    kind = "InvalidInput"
    default_code = "INVALID_INPUT"
    status_code = status.HTTP_400_BAD_REQUEST


class TooMany(CatalogError):
    kind = "TooMany"
    default_code = "TOO_MANY_IDS"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(CatalogError):
    kind = "NotFound"
    default_code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class RateLimited(CatalogError):
    kind = "RateLimited"
    default_code = "RATE_LIMIT_EXCEEDED"
    status_code = status.HTTP_429_TOO_MANY_REQUESTS


class Internal(CatalogError):
    kind = "Internal"
    default_code = "INTERNAL_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


# ---- Error envelope ---------------------------------------------------------

def error_body(message: str, code: str, detail: Optional[str] = None) -> Dict[str, Any]:
    """Build the `{success: false, error: {message, code}}` envelope."""
    error: Dict[str, Any] = {"message": message, "code": code}
    if detail is not None:
        error["detail"] = detail
    return {"success": False, "error": error}


def _render(status_code: int, message: str, code: str, detail: Optional[str] = None) -> JSONResponse:
    settings = get_settings()
    # Do not leak internals in production
    if settings.is_production and status_code >= 500:
        message, code, detail = INTERNAL_MESSAGE, "INTERNAL_ERROR", None
    elif settings.APP_ENV != "development":
        detail = None
    return JSONResponse(content=error_body(message, code, detail), status_code=status_code)


async def _catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %r", request.method, request.url.path, exc)
    else:
        logger.info("%s %s rejected: %r", request.method, request.url.path, exc)
    return _render(exc.status_code, exc.message, exc.code)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return _render(exc.status_code, f"Route {request.url.path} not found", "ROUTE_NOT_FOUND")
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return _render(exc.status_code, "Method not allowed", "METHOD_NOT_ALLOWED")
    return _render(exc.status_code, str(exc.detail or "HTTP error"), "HTTP_ERROR")


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("query", "path"))
    message = f"Invalid parameter '{field}': {first.get('msg')}" if field else "Validation failed"
    return _render(status.HTTP_400_BAD_REQUEST, message, "VALIDATION_ERROR")


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception on %s %s: %s\n%s",
        request.method, request.url.path, exc, traceback.format_exc(),
    )
    return _render(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_MESSAGE, "INTERNAL_ERROR", detail=str(exc))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CatalogError, _catalog_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
