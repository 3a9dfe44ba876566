"""
User storage.

``UserStore`` is the only code that issues queries against ``users``.
A write that trips one of the unique constraints comes back as
``UniqueViolation`` naming the field, whatever the driver's error text
looks like.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import User, normalize_email

logger = logging.getLogger(__name__)

# Checked in order; "email" first because SQLite reports "users.email".
_UNIQUE_FIELDS = ("email", "username")


class UniqueViolation(Exception):
    """A unique constraint on ``field`` rejected the write."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"duplicate value for {field}")


def _violated_field(exc: IntegrityError) -> Optional[str]:
    text = str(exc.orig if exc.orig is not None else exc).lower()
    for field in _UNIQUE_FIELDS:
        if f"uq_users_{field}" in text or f"users.{field}" in text:
            return field
    for field in _UNIQUE_FIELDS:
        if field in text:
            return field
    return None


class UserStore:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self._session.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def find_by_email_or_username(self, email: str, username: str) -> Optional[User]:
        """First user holding either the email or the username."""
        result = await self._session.execute(
            select(User)
            .where(or_(User.email == normalize_email(email), User.username == username.strip()))
            .limit(1)
        )
        return result.scalars().first()

    async def create(self, username: str, email: str, password_hash: str) -> User:
        """
        Insert and commit a new user.

        Raises ``UniqueViolation`` if the username or email is taken.
        """
        user = User(username=username, email=email, password_hash=password_hash)
        self._session.add(user)
        try:
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            field = _violated_field(exc)
            if field is None:
                raise
            logger.info("Unique constraint on %s rejected insert", field)
            raise UniqueViolation(field) from exc
        return user
