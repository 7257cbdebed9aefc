from __future__ import annotations

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.errors import auth_invalid_token
from security.encrypting_jwt import decode_access_token
from security.principal import AuthPrincipal

token_auth_scheme = HTTPBearer(auto_error=True)


def resolve_principal(token: str) -> AuthPrincipal:
    payload = decode_access_token(token)
    if payload is None:
        raise auth_invalid_token()

    issued_at = payload.get("iat")
    return AuthPrincipal(
        user_id=payload["sub"],
        jwt_token=token,
        token_issued_at=int(issued_at) if isinstance(issued_at, (int, float)) else None,
    )


async def verify_any_token(
    credentials: HTTPAuthorizationCredentials = Depends(token_auth_scheme),
) -> AuthPrincipal:
    return resolve_principal(credentials.credentials)
