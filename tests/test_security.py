from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from fastapi import HTTPException
from jose import JWTError, jwt

from core.config import settings
from core.permissions import ensure_allowed, is_allowed
from core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)


def _encode(payload: dict, algorithm: str = "HS256", secret: str = None) -> str:
    return jwt.encode(payload, secret or settings.JWT_SECRET, algorithm=algorithm)


def test_password_hash_roundtrip():
    hashed = get_password_hash("secret1")
    assert hashed != "secret1"
    assert verify_password("secret1", hashed)
    assert not verify_password("secret2", hashed)


def test_access_token_carries_user_claims():
    token, expires = create_access_token(12345601, "a@x.com")
    payload = decode_access_token(token)

    assert payload["user_id"] == 12345601
    assert payload["email"] == "a@x.com"
    assert expires > datetime.now(timezone.utc)


def test_expired_token_is_rejected():
    past = datetime.now(timezone.utc) - timedelta(minutes=5)
    token = _encode({"user_id": 1, "email": "a@x.com", "iat": past - timedelta(days=1), "exp": past})

    with pytest.raises(JWTError):
        decode_access_token(token)


def test_token_signed_with_other_algorithm_is_rejected():
    exp = datetime.now(timezone.utc) + timedelta(hours=1)
    token = _encode({"user_id": 1, "email": "a@x.com", "exp": exp}, algorithm="HS512")

    with pytest.raises(JWTError):
        decode_access_token(token)


def test_token_with_wrong_secret_is_rejected():
    exp = datetime.now(timezone.utc) + timedelta(hours=1)
    token = _encode({"user_id": 1, "email": "a@x.com", "exp": exp}, secret="another-secret")

    with pytest.raises(JWTError):
        decode_access_token(token)


def test_token_without_user_id_is_rejected():
    exp = datetime.now(timezone.utc) + timedelta(hours=1)
    token = _encode({"email": "a@x.com", "exp": exp})

    with pytest.raises(JWTError):
        decode_access_token(token)


def test_malformed_token_is_rejected():
    with pytest.raises(JWTError):
        decode_access_token("not-a-jwt")


def test_is_allowed_policy():
    owner = SimpleNamespace(id=1, is_admin=False)
    stranger = SimpleNamespace(id=2, is_admin=False)
    admin = SimpleNamespace(id=3, is_admin=True)

    assert is_allowed(owner, 1)
    assert not is_allowed(stranger, 1)
    assert is_allowed(admin, 1)
    assert not is_allowed(None, 1)

    assert not is_allowed(owner, 1, "admin")
    assert is_allowed(admin, None, "admin")


def test_ensure_allowed_raises_forbidden():
    stranger = SimpleNamespace(id=2, is_admin=False)

    with pytest.raises(HTTPException) as exc:
        ensure_allowed(stranger, 1, detail="nope")

    assert exc.value.status_code == 403
    assert exc.value.detail == "nope"
