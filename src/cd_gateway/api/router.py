"""User provisioning endpoint.

The identity provider owns sign-up and login. After a successful sign-in the
client calls POST /users once; repeated calls return the same user id.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.cd_account.application.schemas import CreateUserRequest
from src.cd_account.application.service import AccountApplicationService
from src.cd_common.database import get_db_session
from src.cd_common.response import ApiResponse, success_response
from src.cd_gateway.auth.dependencies import get_identity

router = APIRouter(prefix="/users", tags=["users"])
_service = AccountApplicationService()


@router.post(
    "",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Provision the caller's user record",
)
async def create_user(
    request: Request,
    body: CreateUserRequest,
    external_id: Annotated[str, Depends(get_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.create_user(db, external_id, body.email, body.username)
    resp = success_response(data.model_dump(), request)
    resp.message = "User created" if data.created else "User already provisioned"
    return resp
