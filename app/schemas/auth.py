from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class Account(BaseModel):
    """Authenticated account resolved from a hosted-auth session token."""

    id: str
    email: str | None = None
    user_metadata: dict[str, Any] = Field(default_factory=dict)


class UserInfo(BaseModel):
    """Attribution info for a simulation author."""

    email: str
    user_metadata: dict[str, Any] = Field(default_factory=dict)
