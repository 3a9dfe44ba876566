"""
Error translation: every failure leaves the API as ``{"message": ...}``.

    AuthError subclasses     → their own status and message
    RequestValidationError   → 400, the endpoint's missing-fields message
    404 / 405 from routing   → 404, "API route not found."
    anything else            → 500, "Internal Server Error."

Nothing from the request body (passwords included) is ever echoed back.
"""

from __future__ import annotations

import logging
from typing import Tuple

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth.errors import AuthError, missing_fields_message

logger = logging.getLogger(__name__)

ROUTE_NOT_FOUND_MESSAGE = "API route not found."
INTERNAL_ERROR_MESSAGE = "Internal Server Error."


def translate(exc: Exception, path: str = "") -> Tuple[int, str]:
    """Map an exception raised while serving ``path`` to ``(status_code, message)``."""
    if isinstance(exc, AuthError):
        return exc.status_code, exc.message
    if isinstance(exc, RequestValidationError):
        return status.HTTP_400_BAD_REQUEST, missing_fields_message(path)
    if isinstance(exc, StarletteHTTPException):
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return status.HTTP_404_NOT_FOUND, ROUTE_NOT_FOUND_MESSAGE
        return exc.status_code, str(exc.detail)
    return status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE


def error_response(exc: Exception, path: str = "") -> JSONResponse:
    status_code, message = translate(exc, path)
    return JSONResponse(status_code=status_code, content={"message": message})


def register_error_handlers(app: FastAPI) -> None:
    """
    Register the global exception handlers on the app.

    Must be called before ``CORSMiddleware`` is added: the catch-all runs
    as middleware inside the CORS layer so a 500 still carries the CORS
    headers.
    """

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError):
        logger.warning(
            "%s on %s %s: %s",
            type(exc).__name__, request.method, request.url.path, exc.message,
        )
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        # exc.errors() can contain the submitted values; log locations only.
        locations = [".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()]
        logger.warning("Invalid request body on %s: %s", request.url.path, locations)
        return error_response(exc, request.url.path)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        logger.debug("HTTP %d on %s %s", exc.status_code, request.method, request.url.path)
        return error_response(exc)

    @app.middleware("http")
    async def catch_unhandled_errors(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(
                "Unhandled exception on %s %s: %s",
                request.method, request.url.path, exc,
                exc_info=exc,
            )
            return error_response(exc)
