"""
Shared pytest fixtures for the test suite.

The environment is scrubbed of every configuration variable before each
test so results never depend on the machine running them. The app is
driven through httpx's ASGITransport; lifespan is NOT triggered, so the
pressure monitor never samples unless a test records values itself.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from microservice.config import Settings, load_settings
from microservice.main import create_app

CONFIG_ENV_VARS = [name.upper() for name in Settings.model_fields]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove configuration variables inherited from the real environment."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("JWT_SECRET", "test-secret")
    yield monkeypatch


@pytest.fixture()
def settings(clean_env) -> Settings:
    """Validated test settings (no .env file)."""
    clean_env.setenv("NODE_ENV", "test")
    return load_settings(env_file=None)


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest_asyncio.fixture()
async def async_client(app) -> AsyncClient:
    """Async HTTP test client wired to the FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
