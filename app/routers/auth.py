from __future__ import annotations

from fastapi import APIRouter

from app.deps import AccountDep
from app.schemas.auth import Account


router = APIRouter()


@router.get("/me", response_model=Account)
async def get_me(account: AccountDep) -> Account:
    """Return the identity carried by the caller's session token."""

    return account
