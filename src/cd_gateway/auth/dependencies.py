"""FastAPI dependencies: get_identity, get_current_user, require_admin.

Usage in any protected router:
    from src.cd_gateway.auth.dependencies import get_current_user

    @router.get("/protected")
    async def protected(user: User = Depends(get_current_user)):
        ...
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.cd_account.domain.models import User
from src.cd_account.infrastructure.persistence import UserRepository
from src.cd_common.database import get_db_session
from src.cd_common.errors import ForbiddenError, InvalidCredentialsError
from src.cd_gateway.auth.jwt_handler import decode_token

bearer_scheme = HTTPBearer(auto_error=False)

# Reusable 401 exception with WWW-Authenticate header
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)

_users = UserRepository()


async def get_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Return the verified identity-provider subject (external id)."""
    if credentials is None:
        raise _CREDENTIALS_EXCEPTION
    try:
        payload = decode_token(credentials.credentials)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None
    return str(payload["sub"])


async def get_current_user(
    external_id: str = Depends(get_identity),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    """Resolve the token subject to a provisioned user.

    Raises HTTP 401 if the subject has not called POST /users yet.
    """
    user = await _users.get_by_external_id(db, external_id)
    if user is None:
        raise _CREDENTIALS_EXCEPTION
    return user


async def require_admin(external_id: str = Depends(get_identity)) -> str:
    """Only subjects listed in ADMIN_EXTERNAL_IDS may call /admin endpoints."""
    if external_id not in settings.ADMIN_EXTERNAL_IDS:
        raise ForbiddenError()
    return external_id
