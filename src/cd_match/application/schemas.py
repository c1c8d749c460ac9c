"""Pydantic schemas for cd_match API."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.cd_common.cents import cents_to_display
from src.cd_match.domain.models import Match, SubmitResult


class SubmitSolutionRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=65536)
    language: str = Field(..., min_length=1, max_length=32)
    # Graded upstream by the judge; this service only records the verdict
    is_correct: bool


class SubmitResponse(BaseModel):
    success: bool
    match_status: str
    winner_id: str | None = None
    winner_username: str | None = None

    @classmethod
    def from_result(cls, result: SubmitResult) -> "SubmitResponse":
        return cls(
            success=result.success,
            match_status=result.match_status,
            winner_id=result.winner_id,
            winner_username=result.winner_username,
        )


class PlayerView(BaseModel):
    user_id: str
    username: str
    submitted: bool
    submit_time: datetime | None = None


class MatchResponse(BaseModel):
    match_id: str
    status: str
    outcome: str | None
    problem_id: str
    problem_title: str
    problem_difficulty: str
    entry_fee_cents: int
    entry_fee_display: str
    prize_pool_cents: int
    prize_pool_display: str
    player1: PlayerView
    player2: PlayerView
    winner_id: str | None
    winner_username: str | None
    started_at: datetime | None
    completed_at: datetime | None

    @classmethod
    def from_match(cls, match: Match) -> "MatchResponse":
        return cls(
            match_id=match.id,
            status=match.status,
            outcome=match.outcome,
            problem_id=match.problem_id,
            problem_title=match.problem_title,
            problem_difficulty=match.problem_difficulty,
            entry_fee_cents=match.entry_fee,
            entry_fee_display=cents_to_display(match.entry_fee),
            prize_pool_cents=match.prize_pool,
            prize_pool_display=cents_to_display(match.prize_pool),
            player1=PlayerView(
                user_id=match.player1_id,
                username=match.player1_username,
                submitted=match.player1_submitted,
                submit_time=match.player1_submit_time,
            ),
            player2=PlayerView(
                user_id=match.player2_id,
                username=match.player2_username,
                submitted=match.player2_submitted,
                submit_time=match.player2_submit_time,
            ),
            winner_id=match.winner_id,
            winner_username=match.winner_username,
            started_at=match.started_at,
            completed_at=match.completed_at,
        )
