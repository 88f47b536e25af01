"""Fixtures for API tests."""

import pytest
from httpx import ASGITransport, AsyncClient

from pharmastock.api.main import app


@pytest.fixture
def override():
    """Register dependency overrides for one test."""

    def _override(dependency, value):
        app.dependency_overrides[dependency] = lambda: value
        return value

    yield _override
    app.dependency_overrides.clear()


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
