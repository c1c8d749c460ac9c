"""Pydantic schemas for cd_queue API."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.cd_common.cents import cents_to_display
from src.cd_queue.domain.models import JoinResult, QueueEntry


class JoinQueueRequest(BaseModel):
    entry_fee_cents: int = Field(..., gt=0, description="Stake per player in cents")


class JoinQueueResponse(BaseModel):
    matched: bool
    match_id: str | None = None
    queue_id: str | None = None

    @classmethod
    def from_result(cls, result: JoinResult) -> "JoinQueueResponse":
        return cls(matched=result.matched, match_id=result.match_id, queue_id=result.queue_id)


class LeaveQueueResponse(BaseModel):
    left: bool


class QueueStatusResponse(BaseModel):
    waiting: bool
    queue_id: str | None = None
    entry_fee_cents: int | None = None
    entry_fee_display: str | None = None
    rating: int | None = None
    joined_at: datetime | None = None

    @classmethod
    def from_entry(cls, entry: QueueEntry | None) -> "QueueStatusResponse":
        if entry is None:
            return cls(waiting=False)
        return cls(
            waiting=True,
            queue_id=entry.id,
            entry_fee_cents=entry.entry_fee,
            entry_fee_display=cents_to_display(entry.entry_fee),
            rating=entry.rating,
            joined_at=entry.created_at,
        )
