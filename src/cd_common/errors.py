"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: User / identity
  2xxx: Wallet
  3xxx: Queue
  4xxx: Match
  5xxx: Problem catalog
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: User / identity ---

class UserNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(1001, f"User not found: {user_id}", 404)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Invalid or expired token", 401)


class ForbiddenError(AppError):
    def __init__(self, detail: str = "Admin privileges required") -> None:
        super().__init__(1003, detail, 403)


# --- 2xxx: Wallet ---

class InsufficientBalanceError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient balance: required {required} cents, available {available} cents",
            422,
        )


class InvalidAmountError(AppError):
    def __init__(self, amount: int) -> None:
        super().__init__(2002, f"Amount must be positive, got {amount}", 422)


# --- 3xxx: Queue ---

class AlreadyQueuedError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(3001, f"User {user_id} is already waiting in the queue", 409)


class AlreadyInMatchError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(3002, f"User {user_id} is already in an active match", 409)


class InvalidEntryFeeError(AppError):
    def __init__(self, entry_fee: int) -> None:
        super().__init__(3003, f"Entry fee must be positive, got {entry_fee}", 422)


class QueueConflictError(AppError):
    def __init__(self, attempts: int) -> None:
        super().__init__(
            3004, f"Queue slot contention: no claim succeeded after {attempts} attempts", 409
        )


# --- 4xxx: Match ---

class MatchNotFoundError(AppError):
    def __init__(self, match_id: str) -> None:
        super().__init__(4001, f"Match not found: {match_id}", 404)


class MatchNotActiveError(AppError):
    def __init__(self, match_id: str) -> None:
        super().__init__(4002, f"Match is not active: {match_id}", 422)


class NotParticipantError(AppError):
    def __init__(self, user_id: str, match_id: str) -> None:
        super().__init__(4003, f"User {user_id} is not a participant in match {match_id}", 403)


class AlreadySubmittedError(AppError):
    def __init__(self, user_id: str, match_id: str) -> None:
        super().__init__(4004, f"User {user_id} already submitted for match {match_id}", 409)


class OpponentNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(4005, f"Match participant record missing: {user_id}", 500)


# --- 5xxx: Problem catalog ---

class ProblemCatalogEmptyError(AppError):
    def __init__(self) -> None:
        super().__init__(5001, "Problem catalog is empty", 503)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
