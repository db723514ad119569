import pytest

from tests.utils.factories import make_token


@pytest.mark.asyncio
async def test_me_requires_bearer_token(async_client):
    # Act
    resp = await async_client.get("/auth/me")

    # Assert
    assert resp.status_code == 401
    assert resp.json() == {"error": "Unauthorized"}


@pytest.mark.asyncio
async def test_me_rejects_invalid_token(async_client):
    resp = await async_client.get("/auth/me", headers={"Authorization": "Bearer garbage"})

    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_me_returns_account_from_token(async_client):
    # Arrange
    headers = {"Authorization": f"Bearer {make_token(sub='user-9')}"}

    # Act
    resp = await async_client.get("/auth/me", headers=headers)

    # Assert
    assert resp.status_code == 200
    assert resp.json() == {
        "id": "user-9",
        "email": "geo@example.com",
        "user_metadata": {"full_name": "Geo"},
    }


@pytest.mark.asyncio
async def test_health(async_client):
    resp = await async_client.get("/health")

    assert resp.json() == {"status": "ok"}
