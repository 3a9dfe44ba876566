"""
SQLAlchemy ORM models.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, UniqueConstraint, Uuid
from sqlalchemy.orm import DeclarativeBase, validates


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("username", name="uq_users_username"),
        UniqueConstraint("email", name="uq_users_email"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(128), nullable=False)
    email = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    @validates("username")
    def _trim_username(self, key: str, value: str) -> str:
        return value.strip()

    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        return normalize_email(value)

    def to_public_dict(self) -> dict:
        """The user view returned by the API; never includes the hash."""
        return {
            "id": str(self.id),
            "username": self.username,
            "email": self.email,
        }

    def __repr__(self) -> str:
        return f"<User {self.username} ({self.id})>"


def normalize_email(email: str) -> str:
    """Stored form of an email address: trimmed and lowercased."""
    return email.strip().lower()
