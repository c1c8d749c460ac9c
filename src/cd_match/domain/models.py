"""Match domain models — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.cd_common.enums import MatchStatus, PlayerSlot


@dataclass
class Match:
    id: str
    player1_id: str          # the waiting queue entry's owner
    player2_id: str          # the joining requester
    player1_username: str
    player2_username: str
    problem_id: str
    problem_title: str
    problem_difficulty: str
    entry_fee: int           # cents, escrowed from each player
    prize_pool: int          # cents, paid to the winner
    platform_fee: int        # cents, prize_pool + platform_fee == 2 * entry_fee
    status: str = MatchStatus.ACTIVE
    outcome: str | None = None
    player1_submitted: bool = False
    player2_submitted: bool = False
    player1_submit_time: datetime | None = None
    player2_submit_time: datetime | None = None
    winner_id: str | None = None
    winner_username: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status == MatchStatus.ACTIVE

    def slot_of(self, user_id: str) -> PlayerSlot | None:
        if user_id == self.player1_id:
            return PlayerSlot.PLAYER1
        if user_id == self.player2_id:
            return PlayerSlot.PLAYER2
        return None

    def has_submitted(self, slot: PlayerSlot) -> bool:
        if slot == PlayerSlot.PLAYER1:
            return self.player1_submitted
        return self.player2_submitted

    def opponent_of(self, user_id: str) -> str:
        return self.player2_id if user_id == self.player1_id else self.player1_id

    def username_of(self, user_id: str) -> str:
        return self.player1_username if user_id == self.player1_id else self.player2_username


@dataclass
class Submission:
    id: str
    match_id: str
    user_id: str
    username: str
    code: str
    language: str
    is_correct: bool
    submitted_at: datetime


@dataclass
class SubmitResult:
    success: bool
    match_status: str
    winner_id: str | None = None
    winner_username: str | None = None
