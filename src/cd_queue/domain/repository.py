"""QueueRepository Protocol — interface contract for the queue store."""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.cd_queue.domain.models import QueueEntry


class QueueRepositoryProtocol(Protocol):
    async def insert(self, db: AsyncSession, entry: QueueEntry) -> None: ...

    async def find_waiting(self, db: AsyncSession, user_id: str) -> QueueEntry | None: ...

    async def find_compatible(
        self,
        db: AsyncSession,
        exclude_user_id: str,
        entry_fee: int,
        rating_low: int,
        rating_high: int,
    ) -> QueueEntry | None:
        """Oldest WAITING entry with the same fee and a rating inside the band."""
        ...

    async def mark_matched(self, db: AsyncSession, entry_id: str) -> bool: ...

    async def mark_cancelled(self, db: AsyncSession, entry_id: str) -> bool: ...

    async def list_stale(self, db: AsyncSession, created_before: datetime) -> list[QueueEntry]: ...
