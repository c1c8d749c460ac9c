"""Queue domain models — pure dataclasses."""

from dataclasses import dataclass
from datetime import datetime

from src.cd_common.enums import QueueStatus


@dataclass
class QueueEntry:
    id: str
    user_id: str
    username: str
    rating: int              # snapshot at join time
    entry_fee: int           # cents
    status: str = QueueStatus.WAITING
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_waiting(self) -> bool:
        return self.status == QueueStatus.WAITING


@dataclass
class JoinResult:
    matched: bool
    match_id: str | None = None
    queue_id: str | None = None
