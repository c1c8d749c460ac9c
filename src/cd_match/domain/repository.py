"""MatchRepository Protocol — interface contract for the match store."""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.cd_common.enums import PlayerSlot
from src.cd_match.domain.models import Match, Submission


class MatchRepositoryProtocol(Protocol):
    async def create(self, db: AsyncSession, match: Match) -> None: ...

    async def get_by_id(self, db: AsyncSession, match_id: str) -> Match | None: ...

    async def get_for_update(self, db: AsyncSession, match_id: str) -> Match | None: ...

    async def find_active_by_user(self, db: AsyncSession, user_id: str) -> Match | None: ...

    async def insert_submission(self, db: AsyncSession, submission: Submission) -> None: ...

    async def get_submission(
        self, db: AsyncSession, match_id: str, user_id: str
    ) -> Submission | None: ...

    async def mark_submitted(
        self, db: AsyncSession, match_id: str, slot: PlayerSlot, submitted_at: datetime
    ) -> bool:
        """Set the slot's submitted flag; False if already set or match not ACTIVE."""
        ...

    async def complete(
        self,
        db: AsyncSession,
        match_id: str,
        outcome: str,
        winner_id: str | None,
        winner_username: str | None,
        completed_at: datetime,
    ) -> bool:
        """ACTIVE -> COMPLETED; False if the match already left ACTIVE."""
        ...

    async def list_stale_active(self, db: AsyncSession, started_before: datetime) -> list[str]: ...
