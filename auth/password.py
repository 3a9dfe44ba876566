"""
Password hashing and verification.

Uses bcrypt (fresh salt per hash, work factor 10).  Both operations are
CPU-bound, so they run in a worker thread to keep the event loop free
for other requests.
"""

from __future__ import annotations

import asyncio

import bcrypt

_BCRYPT_ROUNDS = 10
_BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes.
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def _hash_sync(password: str) -> str:
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=_BCRYPT_ROUNDS)).decode()


def _verify_sync(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode())
    except (ValueError, TypeError):
        return False


async def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    return await asyncio.to_thread(_hash_sync, password)


async def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison against a bcrypt hash."""
    return await asyncio.to_thread(_verify_sync, password, password_hash)


# Verified against when no account matches, so a miss costs the same as a hit.
DUMMY_HASH = _hash_sync("dummy-password")
