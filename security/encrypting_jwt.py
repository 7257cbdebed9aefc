from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from core.settings import get_settings

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_DAYS = 7


def create_access_token(user_id: str, *, expires_in: timedelta | None = None) -> str:
    issued_at = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "iat": issued_at,
        "exp": issued_at + (expires_in or timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS)),
    }
    return jwt.encode(payload, get_settings().secret_key, algorithm=ALGORITHM, headers={"typ": "JWT"})


def decode_access_token(token: str) -> dict[str, Any] | None:
    try:
        decoded = jwt.decode(token, get_settings().secret_key, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.debug("Rejected expired token")
        return None
    except jwt.InvalidTokenError as exc:
        logger.debug("Rejected invalid token: %s", exc)
        return None

    if not isinstance(decoded.get("sub"), str) or not decoded["sub"]:
        logger.debug("Rejected token without subject")
        return None
    return decoded
