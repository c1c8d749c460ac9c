"""cd_account REST API — wallet and profile endpoints, bearer token required."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.cd_account.application.schemas import DepositRequest
from src.cd_account.application.service import AccountApplicationService
from src.cd_account.domain.models import User
from src.cd_common.database import get_db_session
from src.cd_common.response import ApiResponse, success_response
from src.cd_gateway.auth.dependencies import get_current_user

router = APIRouter(prefix="/account", tags=["account"])

_service = AccountApplicationService()


@router.get("/profile")
async def get_profile(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_profile(db, current_user.id)
    return success_response(data.model_dump(), request)


@router.post("/deposit")
async def deposit(
    body: DepositRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.deposit(db, current_user.id, body.amount_cents)
    return success_response(data.model_dump(), request)


@router.get("/transactions")
async def list_transactions(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    tx_type: str | None = Query(None, description="Filter by TransactionType"),
) -> ApiResponse:
    data = await _service.list_transactions(db, current_user.id, cursor, limit, tx_type)
    return success_response(data.model_dump(), request)
