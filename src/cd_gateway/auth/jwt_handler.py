"""Bearer-token verification for identity-provider issued JWTs.

Tokens are minted by the external identity provider; this service never
issues them. The `sub` claim is the provider's user id and maps to
`users.external_id`.

NOTE: HS256 with a shared secret. A provider that signs with RS256 needs
JWT_ALGORITHM=RS256 and the provider's public key in JWT_SECRET.
"""

from typing import Any

from jose import JWTError, jwt

from config.settings import settings
from src.cd_common.errors import InvalidCredentialsError


def decode_token(token: str) -> dict[str, Any]:
    """Decode and validate a bearer token; return its claims.

    Raises:
        InvalidCredentialsError: signature invalid, token expired, or no `sub`.
    """
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if not payload.get("sub"):
        raise InvalidCredentialsError()
    return payload
