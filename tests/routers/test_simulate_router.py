import json

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import create_app
from app.services.model_client import get_model_client
from app.services.security import get_current_account
from app.services.simulation_fields import MINING_FIELDS
from app.services.simulation_store import get_record_store
from core.settings import reset_settings
from tests.utils.factories import make_account, materials_form, mining_form
from tests.utils.fakes import FakeModelClient, InMemorySimulationStore


@pytest.mark.asyncio
async def test_simulate_stores_private_record_for_caller(async_client, fake_store, fake_model, login):
    # Arrange
    login("account-a")

    # Act
    resp = await async_client.post("/simulate", json=materials_form())

    # Assert
    assert resp.status_code == 200
    sim_id = resp.json()["id"]
    (stored,) = fake_store.rows.values()
    assert str(stored.id) == sim_id
    assert stored.user_id == "account-a"
    assert stored.is_public is False
    assert stored.input_data["materialType"] == "metals"
    assert 0.0 <= stored.ai_result["confidenceScore"] <= 1.0


@pytest.mark.asyncio
async def test_simulate_requires_session(async_client, fake_store, fake_model):
    # Act
    resp = await async_client.post("/simulate", json=materials_form())

    # Assert
    assert resp.status_code == 401
    assert resp.json() == {"error": "Unauthorized"}
    assert fake_store.rows == {}
    assert fake_model.calls == []


@pytest.mark.asyncio
async def test_simulate_rejects_missing_required_fields(async_client, fake_store, fake_model, login):
    login()

    resp = await async_client.post("/simulate", json={"goal": "test"})

    assert resp.status_code == 422
    assert resp.json() == {
        "error": "Missing required fields",
        "details": ["materialType", "composition", "conditions"],
    }
    assert fake_model.calls == []


@pytest.mark.asyncio
async def test_simulate_rejects_structured_values(async_client, fake_store, fake_model, login):
    login()

    resp = await async_client.post("/simulate", json=materials_form(goal={"nested": 1}))

    assert resp.status_code == 422
    assert resp.json()["error"] == "Invalid request"


@pytest.mark.asyncio
async def test_simulate_model_failure_returns_500(async_client, fake_store, fake_model, login):
    # Arrange
    login()
    fake_model.error = "provider unavailable"

    # Act
    resp = await async_client.post("/simulate", json=mining_form())

    # Assert
    assert resp.status_code == 500
    assert resp.json() == {"error": "Simulation failed", "details": "provider unavailable"}
    assert fake_store.rows == {}


@pytest.mark.asyncio
async def test_simulate_mining_keeps_model_json(async_client, fake_store, fake_model, login):
    # Arrange
    login()
    fake_model.response = json.dumps({"processSummary": "ok", "confidenceScore": 0.66})

    # Act
    resp = await async_client.post("/simulate", json=mining_form(title="Leach run 1"))

    # Assert
    assert resp.status_code == 200
    (stored,) = fake_store.rows.values()
    assert stored.title == "Leach run 1"
    assert stored.ai_result == {"processSummary": "ok", "confidenceScore": 0.66}
    assert stored.input_data["pH"] == "1.8"
    assert stored.input_data["eh"] is None


@pytest.mark.asyncio
async def test_list_templates(async_client):
    resp = await async_client.get("/simulate/templates")

    assert resp.status_code == 200
    templates = resp.json()
    assert templates[0]["key"] == "chalcopyrite-acidic"
    assert "Leach Chemistry" in templates[0]["sections"]
    assert templates[-1] == {
        "key": "custom-process",
        "label": "Custom Process (Manual Inputs)",
        "sections": [],
    }


@pytest.mark.asyncio
async def test_get_template_returns_prefilled_form(async_client):
    resp = await async_client.get("/simulate/templates/heap-leach-copper")

    assert resp.status_code == 200
    fields = resp.json()["fields"]
    assert fields["template"] == "heap-leach-copper"
    assert fields["residenceTime"] == "720"
    assert fields["voltage"] == ""


@pytest.mark.asyncio
async def test_get_unknown_template_is_404(async_client):
    resp = await async_client.get("/simulate/templates/nope")

    assert resp.status_code == 404
    assert resp.json() == {"error": "Template not found"}


@pytest.mark.asyncio
async def test_simulate_blank_mining_form_with_goal_only(async_client, fake_store, fake_model, login):
    # Arrange: the mining form posts every key, mostly blank
    login()
    form = {name: "" for name in MINING_FIELDS}
    form.update(title="", goal="maximise copper recovery")

    # Act
    resp = await async_client.post("/simulate", json=form)

    # Assert
    assert resp.status_code == 200
    (stored,) = fake_store.rows.values()
    assert set(stored.input_data) == set(MINING_FIELDS) | {"title"}
    assert stored.input_data["goal"] == "maximise copper recovery"
    assert stored.input_data["pH"] is None
    assert "recoveryData" in stored.ai_result
    assert stored.title == "maximise copper recovery"


@pytest.mark.asyncio
async def test_unexpected_error_returns_json_500(settings_override, monkeypatch, mocker):
    # Arrange: debug mode would answer with a traceback page instead
    monkeypatch.setenv("DEBUG", "false")
    reset_settings()
    app = create_app()
    store = InMemorySimulationStore()
    store.insert = mocker.AsyncMock(side_effect=RuntimeError("disk on fire"))
    app.dependency_overrides[get_record_store] = lambda: store
    app.dependency_overrides[get_model_client] = lambda: FakeModelClient()
    app.dependency_overrides[get_current_account] = lambda: make_account()
    transport = ASGITransport(app=app, raise_app_exceptions=False)

    # Act
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        resp = await client.post("/simulate", json=materials_form())

    # Assert
    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error"}
