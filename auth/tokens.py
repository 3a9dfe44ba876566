"""
Login token creation and verification.

Tokens are HS256 JWTs signed with ``config.jwt_secret`` (env var:
``JWT_SECRET``) and valid for one hour.  Claims::

    {"user": {"id": "<uuid>", "username": "<name>"}, "iat": ..., "exp": ...}
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt

from auth.errors import ConfigurationError, TokenGenerationError
from config.settings import config

logger = logging.getLogger(__name__)

TOKEN_ALGORITHM = "HS256"
TOKEN_LIFETIME = timedelta(hours=1)


def create_token(user_id: str, username: str) -> str:
    """
    Sign a token for the given user.

    Raises ``ConfigurationError`` when no secret is configured and
    ``TokenGenerationError`` when signing itself fails.
    """
    secret = config.jwt_secret
    if not secret:
        logger.error("JWT_SECRET is not defined; cannot sign login token")
        raise ConfigurationError()

    now = datetime.now(timezone.utc)
    payload = {
        "user": {"id": user_id, "username": username},
        "iat": now,
        "exp": now + TOKEN_LIFETIME,
    }
    try:
        return jwt.encode(payload, secret, algorithm=TOKEN_ALGORITHM)
    except (jwt.PyJWTError, TypeError, ValueError) as exc:
        logger.error("JWT signing error: %s", exc)
        raise TokenGenerationError() from exc


def decode_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry and return the claims.

    Raises ``jwt.InvalidTokenError`` (or a subclass such as
    ``jwt.ExpiredSignatureError``) for a bad token.
    """
    return jwt.decode(token, config.jwt_secret, algorithms=[TOKEN_ALGORITHM])
