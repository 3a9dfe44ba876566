"""
Auth API — application entry point.

Serverless platforms import ``app``; ``python main.py`` serves it with
uvicorn on ``HOST``:``PORT``.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import register_error_handlers
from api.middleware import register_middleware
from auth.routes import router as auth_router
from config.settings import config
from database.session import ConnectionGuard

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("sqlalchemy.engine", "aiosqlite", "asyncpg"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # The database connects lazily on the first request.
    yield
    await app.state.connection_guard.dispose()
    logger.info("Database connection closed.")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Auth API",
        version="1.0.0",
        description="User registration and login.",
        lifespan=lifespan,
    )
    app.state.connection_guard = ConnectionGuard()

    # Innermost first: the catch-all 500 must sit inside CORS.
    register_error_handlers(app)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)

    # Routes
    app.include_router(auth_router, prefix="/api/auth")

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
