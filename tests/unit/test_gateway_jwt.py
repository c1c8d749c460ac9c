"""Unit tests for identity-provider token verification."""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from config.settings import settings
from src.cd_common.errors import InvalidCredentialsError
from src.cd_gateway.auth.jwt_handler import decode_token


def _mint(claims: dict, secret: str | None = None) -> str:
    return jwt.encode(claims, secret or settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def test_decode_valid_token() -> None:
    token = _mint({"sub": "idp|abc", "exp": datetime.now(UTC) + timedelta(minutes=5)})
    payload = decode_token(token)
    assert payload["sub"] == "idp|abc"


def test_expired_token_raises_credentials_error() -> None:
    token = _mint({"sub": "idp|abc", "exp": datetime.now(UTC) - timedelta(seconds=1)})
    with pytest.raises(InvalidCredentialsError):
        decode_token(token)


def test_missing_subject_rejected() -> None:
    token = _mint({"email": "a@example.com"})
    with pytest.raises(InvalidCredentialsError):
        decode_token(token)


def test_wrong_secret_rejected() -> None:
    token = _mint({"sub": "idp|abc"}, secret="someone-else")
    with pytest.raises(InvalidCredentialsError):
        decode_token(token)


def test_tampered_token_raises_error() -> None:
    token = _mint({"sub": "idp|abc"})
    tampered = token[:-4] + "xxxx"
    with pytest.raises(InvalidCredentialsError):
        decode_token(tampered)
