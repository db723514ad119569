from __future__ import annotations

import time
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID, uuid4

import jwt

from app.models.simulation import Simulation
from app.schemas.auth import Account


def make_account(account_id: str = "account-a", email: str | None = None) -> Account:
    return Account(
        id=account_id,
        email=email or f"{account_id}@example.com",
        user_metadata={"full_name": "Test User"},
    )


def materials_form(**overrides: Any) -> dict[str, Any]:
    form: dict[str, Any] = {
        "goal": "test",
        "materialType": "metals",
        "composition": "Fe 100%",
        "conditions": "25C",
    }
    form.update(overrides)
    return form


def mining_form(**overrides: Any) -> dict[str, Any]:
    form: dict[str, Any] = {
        "goal": "recovery",
        "mineralType": "chalcopyrite",
        "pH": "1.8",
        "temperature": "80",
    }
    form.update(overrides)
    return form


def make_simulation(
    user_id: str = "account-a",
    *,
    id: UUID | None = None,
    title: str | None = "Sample",
    input_data: dict[str, Any] | None = None,
    ai_result: dict[str, Any] | None = None,
    is_public: bool | None = False,
    tags: list[str] | None = None,
    age_minutes: int = 0,
) -> Simulation:
    return Simulation(
        id=id or uuid4(),
        user_id=user_id,
        title=title,
        input_data=input_data if input_data is not None else materials_form(),
        ai_result=ai_result if ai_result is not None else {"confidenceScore": 0.9},
        is_public=is_public,
        tags=tags,
        created_at=datetime.now(timezone.utc) - timedelta(minutes=age_minutes),
    )


TEST_JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"


def make_token(secret: str = TEST_JWT_SECRET, **overrides: Any) -> str:
    """Encode a session JWT shaped like the hosted auth service's; ``None`` drops a claim."""

    claims: dict[str, Any] = {
        "sub": "user-123",
        "email": "geo@example.com",
        "aud": "authenticated",
        "exp": int(time.time()) + 3600,
        "user_metadata": {"full_name": "Geo"},
    }
    claims.update(overrides)
    claims = {k: v for k, v in claims.items() if v is not None}
    return jwt.encode(claims, secret, algorithm="HS256")
