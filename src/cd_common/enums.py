"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class QueueStatus(str, Enum):
    WAITING = "WAITING"
    MATCHED = "MATCHED"
    CANCELLED = "CANCELLED"


class MatchStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


class MatchOutcome(str, Enum):
    WIN = "WIN"
    DRAW = "DRAW"  # forced by timeout, fees refunded


class PlayerSlot(str, Enum):
    PLAYER1 = "PLAYER1"
    PLAYER2 = "PLAYER2"


class TransactionType(str, Enum):
    DEPOSIT = "DEPOSIT"
    # Escrow on match creation (negative)
    ENTRY_FEE = "ENTRY_FEE"
    # Settlement (positive)
    PRIZE_WIN = "PRIZE_WIN"
    PLATFORM_FEE = "PLATFORM_FEE"
    # Draw by timeout (positive)
    ENTRY_FEE_REFUND = "ENTRY_FEE_REFUND"


class TransactionStatus(str, Enum):
    COMPLETED = "COMPLETED"
