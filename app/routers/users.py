from __future__ import annotations

from fastapi import APIRouter

from app.core.logging import logger
from app.deps import AccountDep
from app.schemas.auth import UserInfo
from app.services.auth_service import UNKNOWN_USER, fetch_user_info


router = APIRouter()


@router.get("/{user_id}", response_model=UserInfo)
async def get_user(_: AccountDep, user_id: str) -> UserInfo:
    """Return attribution info for an account.

    Requires a session. Never fails otherwise: lookup problems fall back to
    placeholder values.
    """

    try:
        return await fetch_user_info(user_id)
    except Exception:
        logger.warning("Unexpected error describing user %s", user_id, exc_info=True)
        return UNKNOWN_USER
