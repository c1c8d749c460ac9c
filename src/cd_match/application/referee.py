"""MatchReferee — records submissions, decides winners, settles matches.

Every mutation of a match runs under that match's asyncio.Lock and inside one
DB transaction that starts with SELECT ... FOR UPDATE on the match row, so two
racing submissions can never both see "opponent has not submitted".
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.cd_account.domain.repository import UserRepositoryProtocol
from src.cd_account.infrastructure.persistence import UserRepository
from src.cd_common.datetime_utils import cutoff, utc_now
from src.cd_common.enums import MatchOutcome, MatchStatus
from src.cd_common.errors import (
    AlreadySubmittedError,
    MatchNotActiveError,
    MatchNotFoundError,
    NotParticipantError,
)
from src.cd_common.id_generator import generate_id
from src.cd_common.telemetry import (
    ErrorReporter,
    get_reporter,
    leave_breadcrumb,
    report_failure,
)
from src.cd_match.domain.arbiter import Verdict, decide_winner
from src.cd_match.domain.models import Match, Submission, SubmitResult
from src.cd_match.domain.repository import MatchRepositoryProtocol
from src.cd_match.domain.settlement import refund_match, settle_match
from src.cd_match.infrastructure.persistence import MatchRepository

logger = logging.getLogger(__name__)


class MatchReferee:
    def __init__(
        self,
        users: UserRepositoryProtocol | None = None,
        matches: MatchRepositoryProtocol | None = None,
        reporter: ErrorReporter | None = None,
    ) -> None:
        self._users: UserRepositoryProtocol = users or UserRepository()
        self._matches: MatchRepositoryProtocol = matches or MatchRepository()
        self._reporter = reporter or get_reporter()
        self._match_locks: dict[str, asyncio.Lock] = {}
        # holders plus waiters per match lock; the entry is dropped at zero
        self._lock_users: dict[str, int] = {}

    async def submit_solution(
        self,
        db: AsyncSession,
        match_id: str,
        user_id: str,
        code: str,
        language: str,
        is_correct: bool,
        now: datetime | None = None,
    ) -> SubmitResult:
        """Record a graded submission and resolve the match if it is decided."""
        async with self._match_lock(match_id):
            try:
                result = await self._submit_inner(
                    db, match_id, user_id, code, language, is_correct, now or utc_now()
                )
                await db.commit()
            except Exception as exc:
                await db.rollback()
                report_failure(
                    self._reporter,
                    "submit_solution",
                    {
                        "match_id": match_id,
                        "user_id": user_id,
                        "language": language,
                        "is_correct": is_correct,
                    },
                    exc,
                )
                raise

        if result.winner_id is not None:
            leave_breadcrumb(
                self._reporter,
                "match",
                "Match completed with winner",
                {"match_id": match_id, "winner_id": result.winner_id},
            )
        return result

    async def expire_match(
        self, db: AsyncSession, match_id: str, now: datetime | None = None
    ) -> bool:
        """Force an ACTIVE match to a DRAW and refund both entry fees.

        Returns False when the match was already completed by the time the
        lock was acquired.
        """
        async with self._match_lock(match_id):
            try:
                match = await self._matches.get_for_update(db, match_id)
                if match is None:
                    raise MatchNotFoundError(match_id)
                expired = False
                if match.is_active:
                    expired = await self._matches.complete(
                        db, match_id, MatchOutcome.DRAW, None, None, now or utc_now()
                    )
                    if expired:
                        await refund_match(match, self._users, db)
                await db.commit()
            except Exception as exc:
                await db.rollback()
                report_failure(self._reporter, "expire_match", {"match_id": match_id}, exc)
                raise

        if expired:
            leave_breadcrumb(
                self._reporter, "match", "Match expired as draw", {"match_id": match_id}
            )
        return expired

    async def expire_stale_matches(self, db: AsyncSession, now: datetime | None = None) -> int:
        """Draw every ACTIVE match older than MATCH_TIMEOUT_SECONDS."""
        now = now or utc_now()
        stale_ids = await self._matches.list_stale_active(
            db, cutoff(now, settings.MATCH_TIMEOUT_SECONDS)
        )
        # End the read-only transaction so each expiry commits on its own
        await db.commit()
        expired = 0
        for match_id in stale_ids:
            if await self.expire_match(db, match_id, now):
                expired += 1
        if expired:
            logger.info("Expired %d stale matches as draws", expired)
        return expired

    @asynccontextmanager
    async def _match_lock(self, match_id: str) -> AsyncIterator[None]:
        lock = self._match_locks.setdefault(match_id, asyncio.Lock())
        self._lock_users[match_id] = self._lock_users.get(match_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[match_id] -= 1
            if self._lock_users[match_id] == 0:
                del self._lock_users[match_id]
                del self._match_locks[match_id]

    async def get_match(self, db: AsyncSession, match_id: str, user_id: str) -> Match:
        match = await self._matches.get_by_id(db, match_id)
        if match is None:
            raise MatchNotFoundError(match_id)
        if match.slot_of(user_id) is None:
            raise NotParticipantError(user_id, match_id)
        return match

    async def get_active_match(self, db: AsyncSession, user_id: str) -> Match | None:
        return await self._matches.find_active_by_user(db, user_id)

    async def _submit_inner(
        self,
        db: AsyncSession,
        match_id: str,
        user_id: str,
        code: str,
        language: str,
        is_correct: bool,
        now: datetime,
    ) -> SubmitResult:
        match = await self._matches.get_for_update(db, match_id)
        if match is None:
            raise MatchNotFoundError(match_id)
        if not match.is_active:
            raise MatchNotActiveError(match_id)
        slot = match.slot_of(user_id)
        if slot is None:
            raise NotParticipantError(user_id, match_id)
        if match.has_submitted(slot):
            raise AlreadySubmittedError(user_id, match_id)

        username = match.username_of(user_id)
        await self._matches.insert_submission(
            db,
            Submission(
                id=generate_id(),
                match_id=match_id,
                user_id=user_id,
                username=username,
                code=code,
                language=language,
                is_correct=is_correct,
                submitted_at=now,
            ),
        )
        if not await self._matches.mark_submitted(db, match_id, slot, now):
            raise AlreadySubmittedError(user_id, match_id)

        opponent_id = match.opponent_of(user_id)
        opponent_sub = await self._matches.get_submission(db, match_id, opponent_id)
        opponent = (
            Verdict(opponent_sub.user_id, opponent_sub.is_correct, opponent_sub.submitted_at)
            if opponent_sub is not None
            else None
        )
        winner_id = decide_winner(Verdict(user_id, is_correct, now), opponent)
        if winner_id is None:
            return SubmitResult(success=True, match_status=MatchStatus.ACTIVE)

        winner_username = match.username_of(winner_id)
        if not await self._matches.complete(
            db, match_id, MatchOutcome.WIN, winner_id, winner_username, now
        ):
            raise MatchNotActiveError(match_id)
        await settle_match(match, winner_id, self._users, db)
        return SubmitResult(
            success=True,
            match_status=MatchStatus.COMPLETED,
            winner_id=winner_id,
            winner_username=winner_username,
        )
