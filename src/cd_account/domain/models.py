"""Domain models for cd_account — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    id: str
    external_id: str                 # identity provider subject
    email: str
    username: str
    wallet_balance: int = 0          # cents, never negative
    rating: int = 1000               # floor 0
    wins: int = 0
    losses: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Transaction:
    id: str
    user_id: str
    tx_type: str                     # TransactionType value
    amount: int                      # cents, positive=credit negative=debit
    balance_after: int               # cents, wallet snapshot after op
    status: str = "COMPLETED"
    match_id: str | None = None
    description: str | None = None
    created_at: datetime | None = None
