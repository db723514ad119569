from __future__ import annotations

from typing import Any, Dict

import httpx
import jwt

from app.core.logging import logger
from app.schemas.auth import Account, UserInfo
from core.settings import get_settings


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and validate a session JWT issued by the hosted auth service.

    Args:
        token: Encoded JWT access token.

    Returns:
        Decoded claims dict if the signature, audience and expiry are valid.
    """

    settings = get_settings()
    return jwt.decode(
        token,
        settings.supabase_jwt_secret.get_secret_value(),
        algorithms=[settings.jwt_algorithm],
        audience=settings.jwt_audience,
        options={"require": ["exp", "sub"]},
    )


def account_from_claims(claims: Dict[str, Any]) -> Account:
    return Account(
        id=str(claims["sub"]),
        email=claims.get("email"),
        user_metadata=claims.get("user_metadata") or {},
    )


GENERIC_USER = UserInfo(email="User", user_metadata={})
UNKNOWN_USER = UserInfo(email="Unknown", user_metadata={})


async def fetch_user_info(
    user_id: str, client: httpx.AsyncClient | None = None
) -> UserInfo:
    """Look up an account's email and metadata through the auth admin API.

    Best effort: without a service role key, or when the lookup fails or
    finds nobody, returns a generic placeholder instead of raising.

    Args:
        user_id: Account id to describe.
        client: Optional HTTP client (tests inject one with a mock transport).

    Returns:
        `UserInfo` for attribution display.
    """

    settings = get_settings()
    if settings.supabase_service_role_key is None:
        return GENERIC_USER

    key = settings.supabase_service_role_key.get_secret_value()
    url = f"{settings.supabase_url.rstrip('/')}/auth/v1/admin/users/{user_id}"
    headers = {"apikey": key, "Authorization": f"Bearer {key}"}

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=10.0) as owned_client:
                resp = await owned_client.get(url, headers=headers)
        else:
            resp = await client.get(url, headers=headers)
        if resp.status_code != 200:
            logger.warning(
                "Admin user lookup for %s returned HTTP %s", user_id, resp.status_code
            )
            return GENERIC_USER
        data = resp.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Admin user lookup for %s failed: %s", user_id, exc)
        return GENERIC_USER

    # The admin API returns the user object directly; some proxies wrap it.
    user = data.get("user", data) if isinstance(data, dict) else None
    if not isinstance(user, dict) or not user.get("id"):
        return GENERIC_USER
    return UserInfo(
        email=user.get("email") or "Unknown",
        user_metadata=user.get("user_metadata") or {},
    )
