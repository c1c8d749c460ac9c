"""cd_match REST API — match detail and solution submission."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.cd_account.domain.models import User
from src.cd_common.database import get_db_session
from src.cd_common.response import ApiResponse, success_response
from src.cd_gateway.auth.dependencies import get_current_user
from src.cd_match.application.schemas import (
    MatchResponse,
    SubmitResponse,
    SubmitSolutionRequest,
)
from src.cd_match.application.service import get_referee

router = APIRouter(prefix="/matches", tags=["matches"])


@router.get("/active")
async def get_active_match(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    match = await get_referee().get_active_match(db, current_user.id)
    data = MatchResponse.from_match(match).model_dump() if match else None
    return success_response(data, request)


@router.get("/{match_id}")
async def get_match(
    match_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    match = await get_referee().get_match(db, match_id, current_user.id)
    return success_response(MatchResponse.from_match(match).model_dump(), request)


@router.post("/{match_id}/submit")
async def submit_solution(
    match_id: str,
    body: SubmitSolutionRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    result = await get_referee().submit_solution(
        db, match_id, current_user.id, body.code, body.language, body.is_correct
    )
    return success_response(SubmitResponse.from_result(result).model_dump(), request)
