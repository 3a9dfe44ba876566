"""
Shared fixtures: a fresh app per test, backed by a throwaway SQLite file
and a known signing secret.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from config.settings import config
from database.session import ConnectionGuard

TEST_JWT_SECRET = "test-jwt-secret-with-enough-length"


@pytest.fixture
def settings(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "database_url", f"sqlite+aiosqlite:///{tmp_path / 'auth.db'}")
    monkeypatch.setattr(config, "jwt_secret", TEST_JWT_SECRET)
    return config


@pytest.fixture
async def app(settings):
    from main import create_app

    application = create_app()
    yield application
    await application.state.connection_guard.dispose()


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
async def guard(settings):
    g = ConnectionGuard()
    await g.ensure_connected()
    yield g
    await g.dispose()


@pytest.fixture
async def db(guard):
    async with guard.session() as session:
        yield session
