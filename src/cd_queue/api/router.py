"""cd_queue REST API — join, leave and inspect the matchmaking queue."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.cd_account.domain.models import User
from src.cd_common.database import get_db_session
from src.cd_common.response import ApiResponse, success_response
from src.cd_gateway.auth.dependencies import get_current_user
from src.cd_queue.application.schemas import (
    JoinQueueRequest,
    JoinQueueResponse,
    LeaveQueueResponse,
    QueueStatusResponse,
)
from src.cd_queue.application.service import get_matchmaker

router = APIRouter(prefix="/queue", tags=["queue"])


@router.post("/join")
async def join_queue(
    body: JoinQueueRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    result = await get_matchmaker().join_queue(db, current_user.id, body.entry_fee_cents)
    data = JoinQueueResponse.from_result(result)
    return success_response(data.model_dump(), request)


@router.post("/leave")
async def leave_queue(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    left = await get_matchmaker().leave_queue(db, current_user.id)
    return success_response(LeaveQueueResponse(left=left).model_dump(), request)


@router.get("/status")
async def queue_status(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    entry = await get_matchmaker().get_waiting_entry(db, current_user.id)
    return success_response(QueueStatusResponse.from_entry(entry).model_dump(), request)
