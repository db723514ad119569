import os
import sys
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

# Ensure the project root is importable so `app.*` modules resolve
_PROJECT_DIR = Path(__file__).resolve().parents[1]
if str(_PROJECT_DIR) not in sys.path:
    sys.path.insert(0, str(_PROJECT_DIR))

from tests.utils.factories import TEST_JWT_SECRET, make_account  # noqa: E402

os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SUPABASE_JWT_SECRET", TEST_JWT_SECRET)
os.environ.setdefault("OPENAI_API_KEY", "sk-test")

from app.main import create_app  # noqa: E402
from app.services.model_client import get_model_client  # noqa: E402
from app.services.security import get_current_account  # noqa: E402
from app.services.simulation_store import get_record_store  # noqa: E402
from core.settings import reset_settings  # noqa: E402
from tests.utils.fakes import FakeModelClient, InMemorySimulationStore  # noqa: E402


@pytest.fixture()
def settings_override(monkeypatch):
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("DB_ECHO", "false")
    monkeypatch.setenv("SUPABASE_URL", "http://auth.test")
    monkeypatch.setenv("SUPABASE_JWT_SECRET", TEST_JWT_SECRET)
    monkeypatch.delenv("SUPABASE_SERVICE_ROLE_KEY", raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    reset_settings()
    yield
    reset_settings()


@pytest.fixture()
def app(settings_override) -> FastAPI:
    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client(app: FastAPI):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture()
def fake_store(app: FastAPI) -> InMemorySimulationStore:
    store = InMemorySimulationStore()
    app.dependency_overrides[get_record_store] = lambda: store
    return store


@pytest.fixture()
def fake_model(app: FastAPI) -> FakeModelClient:
    model = FakeModelClient()
    app.dependency_overrides[get_model_client] = lambda: model
    return model


@pytest.fixture()
def login(app: FastAPI):
    """Return a helper that makes the given account the signed-in caller."""

    def _login(account_id: str = "account-a"):
        account = make_account(account_id)
        app.dependency_overrides[get_current_account] = lambda: account
        return account

    return _login


# Lightweight fallback for pytest-mock's 'mocker' fixture when the plugin isn't loaded
@pytest.fixture()
def mocker():
    from unittest.mock import (
        AsyncMock,
        create_autospec as _create_autospec,
        MagicMock,
        Mock,
        patch,
    )

    class _SimpleMocker:
        def __init__(self):
            self._patchers: list = []
            self.AsyncMock = AsyncMock
            self.MagicMock = MagicMock
            self.Mock = Mock
            self.create_autospec = _create_autospec

        def patch(self, target: str, *args, **kwargs):
            p = patch(target, *args, **kwargs)
            mocked = p.start()
            self._patchers.append(p)
            return mocked

    m = _SimpleMocker()
    try:
        yield m
    finally:
        for p in reversed(m._patchers):
            p.stop()
