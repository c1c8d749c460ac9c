"""Tests for cd_account Pydantic schemas and cursor utilities."""

import pytest
from pydantic import ValidationError

from src.cd_account.application.schemas import (
    CreateUserRequest,
    DepositRequest,
    cursor_decode,
    cursor_encode,
)


class TestDepositRequest:
    def test_valid(self) -> None:
        assert DepositRequest(amount_cents=10000).amount_cents == 10000

    def test_zero_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DepositRequest(amount_cents=0)

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DepositRequest(amount_cents=-100)


class TestCreateUserRequest:
    def test_valid(self) -> None:
        req = CreateUserRequest(email="duelist@example.com", username="duelist_01")
        assert req.username == "duelist_01"

    def test_bad_email_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CreateUserRequest(email="not-an-email", username="duelist")

    def test_username_charset(self) -> None:
        with pytest.raises(ValidationError):
            CreateUserRequest(email="duelist@example.com", username="bad name!")


class TestCursorUtils:
    def test_encode_decode(self) -> None:
        assert cursor_decode(cursor_encode("7391847293")) == "7391847293"

    def test_none_passthrough(self) -> None:
        assert cursor_decode(None) is None

    def test_garbage_returns_none(self) -> None:
        assert cursor_decode("%%%not-base64") is None

    def test_non_numeric_id_returns_none(self) -> None:
        assert cursor_decode(cursor_encode("tx-not-a-snowflake")) is None
