"""
Register and login flows.

``AuthService`` sits between the routes and ``UserStore``.  Every
failure is raised as an ``AuthError`` subclass; turning those into HTTP
responses is ``api.errors``' job.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from auth.errors import (
    LOGIN_FIELDS_MESSAGE,
    REGISTER_FIELDS_MESSAGE,
    ConflictError,
    InvalidCredentialsError,
    ValidationError,
)
from auth.password import DUMMY_HASH, hash_password, verify_password
from auth.tokens import create_token
from database.models import normalize_email
from database.users import UniqueViolation, UserStore

logger = logging.getLogger(__name__)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class AuthService:
    def __init__(self, store: UserStore) -> None:
        self._store = store

    async def register(
        self,
        username: Optional[str],
        email: Optional[str],
        password: Optional[str],
    ) -> Dict[str, Any]:
        """Create a user and return ``{"message", "user"}``."""
        if _is_blank(username) or _is_blank(email) or not password:
            raise ValidationError(REGISTER_FIELDS_MESSAGE)

        existing = await self._store.find_by_email_or_username(email, username)
        if existing is not None:
            field = "email" if existing.email == normalize_email(email) else "username"
            logger.info("Registration rejected: %s already taken", field)
            raise ConflictError(field)

        password_hash = await hash_password(password)
        try:
            user = await self._store.create(username, email, password_hash)
        except UniqueViolation as exc:
            # Lost a race with a concurrent registration.
            logger.info("Registration rejected by unique constraint on %s", exc.field)
            raise ConflictError(exc.field) from exc

        logger.info("Registered user %s (%s)", user.username, user.id)
        return {
            "message": f"Registration successful for {user.username}. Please login.",
            "user": user.to_public_dict(),
        }

    async def login(self, email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        """Check credentials and return ``{"message", "token", "user"}``."""
        if _is_blank(email) or not password:
            raise ValidationError(LOGIN_FIELDS_MESSAGE)

        user = await self._store.find_by_email(email)
        if user is None:
            await verify_password(password, DUMMY_HASH)
            logger.info("Login failed: no matching account")
            raise InvalidCredentialsError()
        if not await verify_password(password, user.password_hash):
            logger.info("Login failed for user %s", user.id)
            raise InvalidCredentialsError()

        token = create_token(str(user.id), user.username)
        logger.info("Login: %s (%s)", user.username, user.id)
        return {
            "message": "Login successful!",
            "token": token,
            "user": user.to_public_dict(),
        }
