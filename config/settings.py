"""
Application settings loaded from environment variables.
"""

from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Database ─────────────────────────────────────────────────────────
    database_url: str = ""              # empty means "not configured"
    database_pool_size: int = 10
    database_max_overflow: int = 20

    # ── Security Secrets ──────────────────────────────────────────────────
    jwt_secret: str = ""                # HMAC secret for login tokens

    # ── Server ───────────────────────────────────────────────────────────
    port: int = 8000
    host: str = "0.0.0.0"
    debug: bool = False
    cors_origins: List[str] = [
        "https://registration-dashboard-frontend.vercel.app",
        "http://localhost:5000",
    ]

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }

    @field_validator("database_url", mode="before")
    @classmethod
    def use_async_driver(cls, v: str) -> str:
        """Hosting providers hand out ``postgresql://``; the engine needs asyncpg."""
        if isinstance(v, str):
            v = v.strip()
            for prefix in ("postgresql://", "postgres://"):
                if v.startswith(prefix):
                    return "postgresql+asyncpg://" + v[len(prefix):]
        return v

    @property
    def missing_settings(self) -> List[str]:
        """Names of required settings that are unset."""
        missing = []
        if not self.database_url:
            missing.append("DATABASE_URL")
        if not self.jwt_secret:
            missing.append("JWT_SECRET")
        return missing


config = Settings()
