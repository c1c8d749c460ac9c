"""Matchmaker — stateful orchestrator for joining and leaving the queue.

One in-process lock serialises every queue mutation. Across processes the
requester's user row is locked first (FOR UPDATE), so one user's joins run
one at a time; opponent entries are claimed with SKIP LOCKED plus CAS
updates. Each call is a single transaction: either the requester is
enqueued, or the opponent's entry is claimed, both wallets are debited and
the match row exists, or nothing changed.
"""

import asyncio
import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.cd_account.domain.models import User
from src.cd_account.domain.repository import UserRepositoryProtocol
from src.cd_account.infrastructure.persistence import UserRepository
from src.cd_common.cents import split_pot
from src.cd_common.datetime_utils import cutoff, utc_now
from src.cd_common.enums import TransactionType
from src.cd_common.errors import (
    AlreadyInMatchError,
    AlreadyQueuedError,
    InsufficientBalanceError,
    InvalidEntryFeeError,
    OpponentNotFoundError,
    QueueConflictError,
    UserNotFoundError,
)
from src.cd_common.id_generator import generate_id
from src.cd_common.telemetry import (
    ErrorReporter,
    get_reporter,
    leave_breadcrumb,
    report_failure,
)
from src.cd_match.domain.models import Match
from src.cd_match.domain.repository import MatchRepositoryProtocol
from src.cd_match.infrastructure.persistence import MatchRepository
from src.cd_problem.domain.repository import ProblemCatalogProtocol
from src.cd_problem.infrastructure.persistence import ProblemCatalog
from src.cd_queue.domain.band import rating_band
from src.cd_queue.domain.models import JoinResult, QueueEntry
from src.cd_queue.domain.repository import QueueRepositoryProtocol
from src.cd_queue.infrastructure.persistence import QueueRepository

logger = logging.getLogger(__name__)


class Matchmaker:
    def __init__(
        self,
        users: UserRepositoryProtocol | None = None,
        queue: QueueRepositoryProtocol | None = None,
        matches: MatchRepositoryProtocol | None = None,
        catalog: ProblemCatalogProtocol | None = None,
        reporter: ErrorReporter | None = None,
    ) -> None:
        self._users: UserRepositoryProtocol = users or UserRepository()
        self._queue: QueueRepositoryProtocol = queue or QueueRepository()
        self._matches: MatchRepositoryProtocol = matches or MatchRepository()
        self._catalog: ProblemCatalogProtocol = catalog or ProblemCatalog()
        self._reporter = reporter or get_reporter()
        self._lock = asyncio.Lock()

    async def join_queue(
        self,
        db: AsyncSession,
        user_id: str,
        entry_fee: int,
        now: datetime | None = None,
    ) -> JoinResult:
        """Pair the user with a compatible waiting player, or enqueue them."""
        async with self._lock:
            try:
                result = await self._join_queue_inner(db, user_id, entry_fee, now or utc_now())
                await db.commit()
            except Exception as exc:
                await db.rollback()
                report_failure(
                    self._reporter,
                    "join_queue",
                    {"user_id": user_id, "entry_fee": entry_fee},
                    exc,
                )
                raise

        if result.matched:
            leave_breadcrumb(
                self._reporter,
                "matchmaking",
                "Match created",
                {"match_id": result.match_id, "entry_fee": entry_fee},
            )
        else:
            leave_breadcrumb(
                self._reporter,
                "matchmaking",
                "User added to queue",
                {"queue_id": result.queue_id, "user_id": user_id},
            )
        return result

    async def leave_queue(self, db: AsyncSession, user_id: str) -> bool:
        """Cancel the user's waiting entry. Idempotent; returns whether one was cancelled."""
        async with self._lock:
            try:
                entry = await self._queue.find_waiting(db, user_id)
                cancelled = False
                if entry is not None:
                    cancelled = await self._queue.mark_cancelled(db, entry.id)
                await db.commit()
            except Exception as exc:
                await db.rollback()
                report_failure(self._reporter, "leave_queue", {"user_id": user_id}, exc)
                raise

        if cancelled:
            leave_breadcrumb(self._reporter, "matchmaking", "User left queue", {"user_id": user_id})
        return cancelled

    async def get_waiting_entry(self, db: AsyncSession, user_id: str) -> QueueEntry | None:
        return await self._queue.find_waiting(db, user_id)

    async def expire_stale_entries(self, db: AsyncSession, now: datetime | None = None) -> int:
        """Cancel WAITING entries older than QUEUE_TIMEOUT_SECONDS."""
        created_before = cutoff(now or utc_now(), settings.QUEUE_TIMEOUT_SECONDS)
        async with self._lock:
            try:
                stale = await self._queue.list_stale(db, created_before)
                expired = 0
                for entry in stale:
                    if await self._queue.mark_cancelled(db, entry.id):
                        expired += 1
                await db.commit()
            except Exception as exc:
                await db.rollback()
                report_failure(
                    self._reporter,
                    "expire_stale_queue",
                    {"created_before": created_before.isoformat()},
                    exc,
                )
                raise
        if expired:
            logger.info("Expired %d stale queue entries (before %s)", expired, created_before)
        return expired

    async def _join_queue_inner(
        self, db: AsyncSession, user_id: str, entry_fee: int, now: datetime
    ) -> JoinResult:
        if entry_fee <= 0:
            raise InvalidEntryFeeError(entry_fee)

        # Preconditions, in order. The requester row lock serialises one user's joins
        # across processes.
        user = await self._users.get_by_id_for_update(db, user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        if user.wallet_balance < entry_fee:
            raise InsufficientBalanceError(entry_fee, user.wallet_balance)
        if await self._queue.find_waiting(db, user_id) is not None:
            raise AlreadyQueuedError(user_id)
        if await self._matches.find_active_by_user(db, user_id) is not None:
            raise AlreadyInMatchError(user_id)

        rating_low, rating_high = rating_band(user.rating)
        conflicts = 0
        while True:
            candidate = await self._queue.find_compatible(
                db, user_id, entry_fee, rating_low, rating_high
            )
            if candidate is None:
                return await self._enqueue(db, user, entry_fee, now)

            opponent = await self._users.get_by_id_for_update(db, candidate.user_id)
            if opponent is None:
                raise OpponentNotFoundError(candidate.user_id)
            if opponent.wallet_balance < entry_fee:
                # Opponent spent the funds while waiting: drop the entry, keep looking
                await self._queue.mark_cancelled(db, candidate.id)
                logger.info(
                    "Cancelled queue entry %s: opponent %s can no longer cover %d",
                    candidate.id,
                    opponent.id,
                    entry_fee,
                )
                continue

            if not await self._queue.mark_matched(db, candidate.id):
                conflicts += 1
                logger.info(
                    "Queue entry %s claimed concurrently (conflict %d)", candidate.id, conflicts
                )
                if conflicts >= settings.MATCH_RETRY_LIMIT:
                    raise QueueConflictError(conflicts)
                continue

            match = await self._create_match(db, user, opponent, entry_fee, now)
            return JoinResult(matched=True, match_id=match.id)

    async def _enqueue(
        self, db: AsyncSession, user: User, entry_fee: int, now: datetime
    ) -> JoinResult:
        entry = QueueEntry(
            id=generate_id(),
            user_id=user.id,
            username=user.username,
            rating=user.rating,
            entry_fee=entry_fee,
            created_at=now,
        )
        await self._queue.insert(db, entry)
        return JoinResult(matched=False, queue_id=entry.id)

    async def _create_match(
        self, db: AsyncSession, requester: User, opponent: User, entry_fee: int, now: datetime
    ) -> Match:
        problem = await self._catalog.random_pick(db)
        prize_pool, platform_fee = split_pot(entry_fee, settings.PLATFORM_FEE_BPS)
        match = Match(
            id=generate_id(),
            player1_id=opponent.id,
            player2_id=requester.id,
            player1_username=opponent.username,
            player2_username=requester.username,
            problem_id=problem.id,
            problem_title=problem.title,
            problem_difficulty=problem.difficulty,
            entry_fee=entry_fee,
            prize_pool=prize_pool,
            platform_fee=platform_fee,
            started_at=now,
        )
        await self._matches.create(db, match)

        # Escrow: both debits land in this transaction or neither does
        for player in (opponent, requester):
            await self._users.debit(
                db,
                player.id,
                entry_fee,
                TransactionType.ENTRY_FEE,
                match.id,
                "Entry fee for match",
            )
        return match
