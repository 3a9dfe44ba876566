"""
Failure categories for the auth endpoints.

Each error carries the HTTP status and the user-facing message it is
rendered with (see ``api.errors``).  Messages never mention which
setting is missing, whether an email is registered, or any password
material.
"""

from __future__ import annotations

REGISTER_FIELDS_MESSAGE = "Please provide all required fields."
LOGIN_FIELDS_MESSAGE = "Please provide email and password."


def missing_fields_message(path: str) -> str:
    """The missing-fields message for the endpoint at ``path``."""
    if path.rstrip("/").endswith("/login"):
        return LOGIN_FIELDS_MESSAGE
    return REGISTER_FIELDS_MESSAGE


class AuthError(Exception):
    """Base class for every failure the auth API reports to the caller."""

    status_code: int = 500
    message: str = "Internal Server Error."

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ConfigurationError(AuthError):
    """DATABASE_URL or JWT_SECRET is not set."""

    status_code = 500
    message = "Server configuration error."


class StoreUnavailableError(AuthError):
    status_code = 503
    message = "Service temporarily unavailable: Cannot connect to database."


class ValidationError(AuthError):
    status_code = 400
    message = "Please provide all required fields."


class ConflictError(AuthError):
    """A username or email is already registered."""

    status_code = 409

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"{field[:1].upper()}{field[1:]} is already taken.")


class InvalidCredentialsError(AuthError):
    """Unknown email or wrong password; the two are indistinguishable."""

    status_code = 401
    message = "Invalid credentials."


class TokenGenerationError(AuthError):
    status_code = 500
    message = "Token generation failed."
