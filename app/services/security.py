from __future__ import annotations

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.schemas.auth import Account
from app.services.auth_service import account_from_claims, decode_token


_bearer = HTTPBearer(auto_error=False)


async def get_current_account(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> Account:
    """Resolve the signed-in `Account` from the hosted-auth Bearer JWT.

    Args:
        creds: Bearer token extracted from the request.

    Returns:
        The `Account` named by the token's subject claim.
    """

    if creds is None or creds.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    try:
        claims = decode_token(creds.credentials)
    except jwt.PyJWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    if not claims.get("sub"):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return account_from_claims(claims)
