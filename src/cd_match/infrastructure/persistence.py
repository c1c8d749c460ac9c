"""MatchRepository — raw SQL persistence for matches and submissions.

State transitions are compare-and-swap UPDATEs guarded on the current
status / flag; a 0-row result means another writer got there first.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.cd_common.enums import PlayerSlot
from src.cd_match.domain.models import Match, Submission

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_MATCH_COLUMNS = """
    id, player1_id, player2_id, player1_username, player2_username,
    problem_id, problem_title, problem_difficulty,
    entry_fee, prize_pool, platform_fee, status, outcome,
    player1_submitted, player2_submitted, player1_submit_time, player2_submit_time,
    winner_id, winner_username, started_at, completed_at
"""

_INSERT_MATCH_SQL = text("""
    INSERT INTO matches (id, player1_id, player2_id, player1_username, player2_username,
        problem_id, problem_title, problem_difficulty,
        entry_fee, prize_pool, platform_fee, status, started_at)
    VALUES (:id, :player1_id, :player2_id, :player1_username, :player2_username,
        :problem_id, :problem_title, :problem_difficulty,
        :entry_fee, :prize_pool, :platform_fee, 'ACTIVE', :started_at)
""")

_GET_MATCH_SQL = text(f"SELECT {_MATCH_COLUMNS} FROM matches WHERE id = :id")

_GET_MATCH_FOR_UPDATE_SQL = text(f"SELECT {_MATCH_COLUMNS} FROM matches WHERE id = :id FOR UPDATE")

_FIND_ACTIVE_BY_USER_SQL = text(f"""
    SELECT {_MATCH_COLUMNS}
    FROM matches
    WHERE status = 'ACTIVE'
      AND (player1_id = :user_id OR player2_id = :user_id)
    ORDER BY started_at ASC
    LIMIT 1
""")

_MARK_SUBMITTED_SQL = {
    PlayerSlot.PLAYER1: text("""
        UPDATE matches
        SET player1_submitted = TRUE, player1_submit_time = :submitted_at
        WHERE id = :id AND status = 'ACTIVE' AND player1_submitted = FALSE
        RETURNING id
    """),
    PlayerSlot.PLAYER2: text("""
        UPDATE matches
        SET player2_submitted = TRUE, player2_submit_time = :submitted_at
        WHERE id = :id AND status = 'ACTIVE' AND player2_submitted = FALSE
        RETURNING id
    """),
}

_COMPLETE_MATCH_SQL = text("""
    UPDATE matches
    SET status = 'COMPLETED', outcome = :outcome,
        winner_id = :winner_id, winner_username = :winner_username,
        completed_at = :completed_at
    WHERE id = :id AND status = 'ACTIVE'
    RETURNING id
""")

_LIST_STALE_ACTIVE_SQL = text("""
    SELECT id FROM matches
    WHERE status = 'ACTIVE' AND started_at < :started_before
    ORDER BY started_at ASC
""")

_INSERT_SUBMISSION_SQL = text("""
    INSERT INTO submissions (id, match_id, user_id, username, code, language,
        is_correct, submitted_at)
    VALUES (:id, :match_id, :user_id, :username, :code, :language,
        :is_correct, :submitted_at)
""")

_GET_SUBMISSION_SQL = text("""
    SELECT id, match_id, user_id, username, code, language, is_correct, submitted_at
    FROM submissions
    WHERE match_id = :match_id AND user_id = :user_id
""")


# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_match(row: Any) -> Match:
    return Match(
        id=row.id,
        player1_id=row.player1_id,
        player2_id=row.player2_id,
        player1_username=row.player1_username,
        player2_username=row.player2_username,
        problem_id=row.problem_id,
        problem_title=row.problem_title,
        problem_difficulty=row.problem_difficulty,
        entry_fee=row.entry_fee,
        prize_pool=row.prize_pool,
        platform_fee=row.platform_fee,
        status=row.status,
        outcome=row.outcome,
        player1_submitted=row.player1_submitted,
        player2_submitted=row.player2_submitted,
        player1_submit_time=row.player1_submit_time,
        player2_submit_time=row.player2_submit_time,
        winner_id=row.winner_id,
        winner_username=row.winner_username,
        started_at=row.started_at,
        completed_at=row.completed_at,
    )


def _row_to_submission(row: Any) -> Submission:
    return Submission(
        id=row.id,
        match_id=row.match_id,
        user_id=row.user_id,
        username=row.username,
        code=row.code,
        language=row.language,
        is_correct=row.is_correct,
        submitted_at=row.submitted_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class MatchRepository:
    """Concrete implementation of MatchRepositoryProtocol using raw SQL."""

    async def create(self, db: AsyncSession, match: Match) -> None:
        await db.execute(
            _INSERT_MATCH_SQL,
            {
                "id": match.id,
                "player1_id": match.player1_id,
                "player2_id": match.player2_id,
                "player1_username": match.player1_username,
                "player2_username": match.player2_username,
                "problem_id": match.problem_id,
                "problem_title": match.problem_title,
                "problem_difficulty": match.problem_difficulty,
                "entry_fee": match.entry_fee,
                "prize_pool": match.prize_pool,
                "platform_fee": match.platform_fee,
                "started_at": match.started_at,
            },
        )

    async def get_by_id(self, db: AsyncSession, match_id: str) -> Match | None:
        row = (await db.execute(_GET_MATCH_SQL, {"id": match_id})).fetchone()
        return _row_to_match(row) if row else None

    async def get_for_update(self, db: AsyncSession, match_id: str) -> Match | None:
        row = (await db.execute(_GET_MATCH_FOR_UPDATE_SQL, {"id": match_id})).fetchone()
        return _row_to_match(row) if row else None

    async def find_active_by_user(self, db: AsyncSession, user_id: str) -> Match | None:
        row = (await db.execute(_FIND_ACTIVE_BY_USER_SQL, {"user_id": user_id})).fetchone()
        return _row_to_match(row) if row else None

    async def insert_submission(self, db: AsyncSession, submission: Submission) -> None:
        await db.execute(
            _INSERT_SUBMISSION_SQL,
            {
                "id": submission.id,
                "match_id": submission.match_id,
                "user_id": submission.user_id,
                "username": submission.username,
                "code": submission.code,
                "language": submission.language,
                "is_correct": submission.is_correct,
                "submitted_at": submission.submitted_at,
            },
        )

    async def get_submission(
        self, db: AsyncSession, match_id: str, user_id: str
    ) -> Submission | None:
        row = (
            await db.execute(_GET_SUBMISSION_SQL, {"match_id": match_id, "user_id": user_id})
        ).fetchone()
        return _row_to_submission(row) if row else None

    async def mark_submitted(
        self, db: AsyncSession, match_id: str, slot: PlayerSlot, submitted_at: datetime
    ) -> bool:
        result = await db.execute(
            _MARK_SUBMITTED_SQL[slot], {"id": match_id, "submitted_at": submitted_at}
        )
        return result.fetchone() is not None

    async def complete(
        self,
        db: AsyncSession,
        match_id: str,
        outcome: str,
        winner_id: str | None,
        winner_username: str | None,
        completed_at: datetime,
    ) -> bool:
        result = await db.execute(
            _COMPLETE_MATCH_SQL,
            {
                "id": match_id,
                "outcome": outcome,
                "winner_id": winner_id,
                "winner_username": winner_username,
                "completed_at": completed_at,
            },
        )
        return result.fetchone() is not None

    async def list_stale_active(self, db: AsyncSession, started_before: datetime) -> list[str]:
        result = await db.execute(_LIST_STALE_ACTIVE_SQL, {"started_before": started_before})
        return [row.id for row in result.fetchall()]
