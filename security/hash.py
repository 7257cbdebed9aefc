from __future__ import annotations

import bcrypt

BCRYPT_ROUNDS = 10


def hash_password(password: str | bytes) -> str:
    raw = password.encode("utf-8") if isinstance(password, str) else password
    return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def check_password(password: str | bytes, hashed: str | bytes) -> bool:
    raw = password.encode("utf-8") if isinstance(password, str) else password
    stored = hashed.encode("utf-8") if isinstance(hashed, str) else hashed
    try:
        return bcrypt.checkpw(raw, stored)
    except ValueError:
        return False
