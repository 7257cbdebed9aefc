from datetime import timedelta

import jwt
import pytest

from core.errors import AppException, ErrorCode
from core.settings import get_settings
from security.auth import resolve_principal
from security.encrypting_jwt import ALGORITHM, create_access_token, decode_access_token
from security.hash import check_password, hash_password


def test_access_token_round_trips_subject():
    token = create_access_token("user-1")

    payload = decode_access_token(token)

    assert payload is not None
    assert payload["sub"] == "user-1"
    assert payload["exp"] - payload["iat"] == 7 * 24 * 60 * 60


def test_expired_token_is_rejected():
    token = create_access_token("user-1", expires_in=timedelta(seconds=-5))

    assert decode_access_token(token) is None


def test_token_signed_with_other_secret_is_rejected():
    token = jwt.encode({"sub": "user-1"}, "another-secret-key-that-is-long-enough-0123", algorithm=ALGORITHM)

    assert decode_access_token(token) is None


def test_token_without_subject_is_rejected():
    token = jwt.encode({"name": "x"}, get_settings().secret_key, algorithm=ALGORITHM)

    assert decode_access_token(token) is None


def test_resolve_principal_raises_invalid_token():
    with pytest.raises(AppException) as exc_info:
        resolve_principal("not-a-jwt")

    assert exc_info.value.status_code == 401
    assert exc_info.value.code is ErrorCode.AUTH_INVALID_TOKEN


def test_resolve_principal_carries_user_id():
    principal = resolve_principal(create_access_token("user-7"))

    assert principal.user_id == "user-7"
    assert principal.token_issued_at is not None


def test_password_hash_verifies_only_matching_password():
    hashed = hash_password("correct horse")

    assert hashed != "correct horse"
    assert check_password("correct horse", hashed) is True
    assert check_password("wrong horse", hashed) is False


def test_check_password_handles_malformed_hash():
    assert check_password("anything", "not-a-bcrypt-hash") is False
