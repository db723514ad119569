import httpx
import pytest

from app.services.auth_service import GENERIC_USER, fetch_user_info
from core.settings import reset_settings


@pytest.fixture()
def service_key(settings_override, monkeypatch):
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service-key")
    reset_settings()


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_without_service_key_returns_generic_user(settings_override):
    def handler(request):  # pragma: no cover - must not be called
        raise AssertionError("admin API should not be called")

    async with _client(handler) as client:
        info = await fetch_user_info("user-1", client=client)

    assert info == GENERIC_USER
    assert info.email == "User"


@pytest.mark.asyncio
async def test_admin_lookup_returns_email_and_metadata(service_key):
    # Arrange
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["apikey"] = request.headers.get("apikey")
        seen["auth"] = request.headers.get("authorization")
        return httpx.Response(
            200,
            json={
                "id": "user-1",
                "email": "geo@example.com",
                "user_metadata": {"full_name": "Geo Logist"},
            },
        )

    # Act
    async with _client(handler) as client:
        info = await fetch_user_info("user-1", client=client)

    # Assert
    assert info.email == "geo@example.com"
    assert info.user_metadata == {"full_name": "Geo Logist"}
    assert seen["url"] == "http://auth.test/auth/v1/admin/users/user-1"
    assert seen["apikey"] == "service-key"
    assert seen["auth"] == "Bearer service-key"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(404, json={"msg": "User not found"}),
        httpx.Response(500, text="boom"),
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"user": None}),
    ],
)
async def test_failed_lookup_falls_back_to_generic_user(service_key, response):
    async with _client(lambda request: response) as client:
        info = await fetch_user_info("user-1", client=client)

    assert info == GENERIC_USER


@pytest.mark.asyncio
async def test_transport_error_falls_back_to_generic_user(service_key):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        info = await fetch_user_info("user-1", client=client)

    assert info == GENERIC_USER
