"""
FastAPI dependencies for the auth routes.

Every route that touches the store depends on ``db_session``, which
runs ``ConnectionGuard.ensure_connected()`` before anything else.
"""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from auth.service import AuthService
from database.session import ConnectionGuard
from database.users import UserStore


def get_connection_guard(request: Request) -> ConnectionGuard:
    return request.app.state.connection_guard


async def db_session(
    guard: ConnectionGuard = Depends(get_connection_guard),
) -> AsyncGenerator[AsyncSession, None]:
    """Connect if needed, then yield a session for the request."""
    await guard.ensure_connected()
    async with guard.session() as session:
        yield session


async def get_auth_service(session: AsyncSession = Depends(db_session)) -> AuthService:
    return AuthService(UserStore(session))
