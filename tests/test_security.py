"""Tests for password hashing and token helpers."""

from datetime import UTC, datetime, timedelta

from jose import jwt

from macro_tracker.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

SECRET = "unit-secret"


def test_password_hash_roundtrip() -> None:
    hashed = hash_password("password123")

    assert verify_password("password123", hashed)
    assert not verify_password("password124", hashed)
    assert not verify_password("", hashed)


def test_access_token_carries_user_id() -> None:
    token = create_access_token(42, SECRET, "HS256", ttl_seconds=60)

    assert decode_access_token(token, SECRET, "HS256") == 42


def test_expired_token_is_rejected() -> None:
    issued_at = datetime.now(tz=UTC) - timedelta(hours=2)
    token = create_access_token(42, SECRET, "HS256", ttl_seconds=60, now=issued_at)

    assert decode_access_token(token, SECRET, "HS256") is None


def test_token_signed_with_other_secret_is_rejected() -> None:
    token = create_access_token(42, "other-secret", "HS256", ttl_seconds=60)

    assert decode_access_token(token, SECRET, "HS256") is None


def test_token_of_other_type_is_rejected() -> None:
    token = jwt.encode({"sub": "42", "type": "refresh"}, SECRET, algorithm="HS256")

    assert decode_access_token(token, SECRET, "HS256") is None
