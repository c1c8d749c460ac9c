"""QueueRepository — raw SQL persistence for the matchmaking queue.

`find_compatible` locks the chosen row with FOR UPDATE SKIP LOCKED so two
joiners in different processes never pick the same waiting entry; status
transitions are compare-and-swap on status = 'WAITING'.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.cd_queue.domain.models import QueueEntry

_QUEUE_COLUMNS = "id, user_id, username, rating, entry_fee, status, created_at, updated_at"

_INSERT_ENTRY_SQL = text("""
    INSERT INTO match_queue (id, user_id, username, rating, entry_fee, status, created_at)
    VALUES (:id, :user_id, :username, :rating, :entry_fee, 'WAITING', :created_at)
""")

_FIND_WAITING_SQL = text(f"""
    SELECT {_QUEUE_COLUMNS}
    FROM match_queue
    WHERE user_id = :user_id AND status = 'WAITING'
    LIMIT 1
""")

_FIND_COMPATIBLE_SQL = text(f"""
    SELECT {_QUEUE_COLUMNS}
    FROM match_queue
    WHERE status = 'WAITING'
      AND user_id <> :exclude_user_id
      AND entry_fee = :entry_fee
      AND rating BETWEEN :rating_low AND :rating_high
    ORDER BY created_at ASC, id ASC
    LIMIT 1
    FOR UPDATE SKIP LOCKED
""")

_MARK_MATCHED_SQL = text("""
    UPDATE match_queue
    SET status = 'MATCHED', updated_at = NOW()
    WHERE id = :id AND status = 'WAITING'
    RETURNING id
""")

_MARK_CANCELLED_SQL = text("""
    UPDATE match_queue
    SET status = 'CANCELLED', updated_at = NOW()
    WHERE id = :id AND status = 'WAITING'
    RETURNING id
""")

_LIST_STALE_SQL = text(f"""
    SELECT {_QUEUE_COLUMNS}
    FROM match_queue
    WHERE status = 'WAITING' AND created_at < :created_before
    ORDER BY created_at ASC
""")


def _row_to_entry(row: Any) -> QueueEntry:
    return QueueEntry(
        id=row.id,
        user_id=row.user_id,
        username=row.username,
        rating=row.rating,
        entry_fee=row.entry_fee,
        status=row.status,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class QueueRepository:
    """Concrete implementation of QueueRepositoryProtocol using raw SQL."""

    async def insert(self, db: AsyncSession, entry: QueueEntry) -> None:
        await db.execute(
            _INSERT_ENTRY_SQL,
            {
                "id": entry.id,
                "user_id": entry.user_id,
                "username": entry.username,
                "rating": entry.rating,
                "entry_fee": entry.entry_fee,
                "created_at": entry.created_at,
            },
        )

    async def find_waiting(self, db: AsyncSession, user_id: str) -> QueueEntry | None:
        row = (await db.execute(_FIND_WAITING_SQL, {"user_id": user_id})).fetchone()
        return _row_to_entry(row) if row else None

    async def find_compatible(
        self,
        db: AsyncSession,
        exclude_user_id: str,
        entry_fee: int,
        rating_low: int,
        rating_high: int,
    ) -> QueueEntry | None:
        row = (
            await db.execute(
                _FIND_COMPATIBLE_SQL,
                {
                    "exclude_user_id": exclude_user_id,
                    "entry_fee": entry_fee,
                    "rating_low": rating_low,
                    "rating_high": rating_high,
                },
            )
        ).fetchone()
        return _row_to_entry(row) if row else None

    async def mark_matched(self, db: AsyncSession, entry_id: str) -> bool:
        result = await db.execute(_MARK_MATCHED_SQL, {"id": entry_id})
        return result.fetchone() is not None

    async def mark_cancelled(self, db: AsyncSession, entry_id: str) -> bool:
        result = await db.execute(_MARK_CANCELLED_SQL, {"id": entry_id})
        return result.fetchone() is not None

    async def list_stale(self, db: AsyncSession, created_before: datetime) -> list[QueueEntry]:
        result = await db.execute(_LIST_STALE_SQL, {"created_before": created_before})
        return [_row_to_entry(row) for row in result.fetchall()]
