"""Pydantic schemas and cursor utilities for cd_account API."""

import base64
import json

from pydantic import BaseModel, EmailStr, Field

from src.cd_account.domain.models import Transaction, User
from src.cd_common.cents import cents_to_display

# ---------------------------------------------------------------------------
# Cursor-based pagination utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_id: str) -> str:
    """Encode a transaction id into an opaque Base64 cursor string."""
    payload = json.dumps({"id": last_id})
    return base64.b64encode(payload.encode()).decode()


def cursor_decode(cursor: str | None) -> str | None:
    """Decode a cursor string back to the last seen id. Returns None on error.

    Transaction ids are numeric snowflakes; anything else is treated as no cursor.
    """
    if cursor is None:
        return None
    try:
        payload = json.loads(base64.b64decode(cursor.encode()).decode())
        value = str(payload["id"])
        return value if value.isdigit() else None
    except Exception:
        return None


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateUserRequest(BaseModel):
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=64, pattern=r"^[a-zA-Z0-9_]+$")


class DepositRequest(BaseModel):
    amount_cents: int = Field(..., gt=0, description="Amount to deposit in cents")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class CreateUserResponse(BaseModel):
    user_id: str
    created: bool


class ProfileResponse(BaseModel):
    user_id: str
    username: str
    email: str
    rating: int
    wins: int
    losses: int
    wallet_balance_cents: int
    wallet_balance_display: str

    @classmethod
    def from_user(cls, user: User) -> "ProfileResponse":
        return cls(
            user_id=user.id,
            username=user.username,
            email=user.email,
            rating=user.rating,
            wins=user.wins,
            losses=user.losses,
            wallet_balance_cents=user.wallet_balance,
            wallet_balance_display=cents_to_display(user.wallet_balance),
        )


class DepositResponse(BaseModel):
    wallet_balance_cents: int
    wallet_balance_display: str
    deposited_cents: int
    transaction_id: str


class TransactionItem(BaseModel):
    id: str
    tx_type: str
    amount_cents: int
    amount_display: str
    balance_after_cents: int
    status: str
    match_id: str | None
    description: str | None
    created_at: str  # ISO8601 string

    @classmethod
    def from_tx(cls, tx: Transaction) -> "TransactionItem":
        return cls(
            id=tx.id,
            tx_type=tx.tx_type,
            amount_cents=tx.amount,
            amount_display=cents_to_display(tx.amount),
            balance_after_cents=tx.balance_after,
            status=tx.status,
            match_id=tx.match_id,
            description=tx.description,
            created_at=tx.created_at.isoformat() if tx.created_at else "",
        )


class TransactionListResponse(BaseModel):
    items: list[TransactionItem]
    next_cursor: str | None
    has_more: bool
