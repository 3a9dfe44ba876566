"""
Global middleware.
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from config.settings import config

logger = logging.getLogger(__name__)

CORS_REJECTED_MESSAGE = "Not allowed by CORS."


def register_middleware(app: FastAPI) -> None:
    """
    Attach app-level middleware.

    Must be called after ``CORSMiddleware`` is added so the origin check
    runs first, preflight requests included.
    """

    @app.middleware("http")
    async def request_timer(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.debug("%s %s — %.3fs", request.method, request.url.path, elapsed)
        return response

    @app.middleware("http")
    async def reject_unknown_origins(request: Request, call_next):
        # No Origin header means a non-browser client; those always pass.
        origin = request.headers.get("origin")
        if origin is not None and origin not in config.cors_origins:
            logger.warning("Rejected request from origin %s", origin)
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content={"message": CORS_REJECTED_MESSAGE},
            )
        return await call_next(request)
