"""Admin REST API."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.cd_admin.application.service import AdminService
from src.cd_common.database import get_db_session
from src.cd_common.response import ApiResponse, success_response
from src.cd_gateway.auth.dependencies import require_admin

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])
_service = AdminService()


@router.post("/queue/expire")
async def expire_stale_queue(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return success_response(await _service.expire_stale_queue(db), request)


@router.post("/matches/expire")
async def expire_stale_matches(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return success_response(await _service.expire_stale_matches(db), request)


@router.get("/invariants")
async def verify_funds_invariant(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    return success_response(await _service.verify_funds_invariant(db), request)
