"""Tests for cd_common.errors and cd_common.response."""

from src.cd_common.errors import (
    AlreadyInMatchError,
    AlreadyQueuedError,
    AlreadySubmittedError,
    AppError,
    InsufficientBalanceError,
    MatchNotActiveError,
    MatchNotFoundError,
    NotParticipantError,
    OpponentNotFoundError,
    ProblemCatalogEmptyError,
    QueueConflictError,
    UserNotFoundError,
)
from src.cd_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1001, message="test"), Exception)


class TestSpecificErrors:
    def test_user_not_found(self) -> None:
        err = UserNotFoundError("u-1")
        assert (err.code, err.http_status) == (1001, 404)
        assert "u-1" in err.message

    def test_insufficient_balance(self) -> None:
        err = InsufficientBalanceError(required=6500, available=3000)
        assert (err.code, err.http_status) == (2001, 422)
        assert "6500" in err.message
        assert "3000" in err.message

    def test_queue_errors(self) -> None:
        assert AlreadyQueuedError("u-1").code == 3001
        assert AlreadyInMatchError("u-1").code == 3002
        assert QueueConflictError(3).http_status == 409

    def test_match_errors(self) -> None:
        assert (MatchNotFoundError("m-1").code, MatchNotFoundError("m-1").http_status) == (
            4001,
            404,
        )
        assert MatchNotActiveError("m-1").code == 4002
        assert NotParticipantError("u-1", "m-1").http_status == 403
        assert AlreadySubmittedError("u-1", "m-1").http_status == 409
        assert OpponentNotFoundError("u-2").http_status == 500

    def test_catalog_empty(self) -> None:
        err = ProblemCatalogEmptyError()
        assert (err.code, err.http_status) == (5001, 503)

    def test_all_subclass_app_error(self) -> None:
        assert isinstance(MatchNotFoundError("m-1"), AppError)


class TestApiResponse:
    def test_success_response(self) -> None:
        resp = success_response({"matched": True})
        assert isinstance(resp, ApiResponse)
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"matched": True}
        assert resp.request_id.startswith("req_")

    def test_error_response(self) -> None:
        resp = error_response(4001, "Match not found: m-1")
        assert resp.code == 4001
        assert resp.data is None
