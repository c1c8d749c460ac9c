"""UserRepository — concrete implementation of UserRepositoryProtocol.

Every wallet mutation is an atomic UPDATE ... RETURNING followed by the
transaction-log INSERT, both on the caller's session. A debit that returns
0 rows means the balance could not cover it.

Transaction ownership: the CALLER (application service) commits or rolls back.
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.cd_account.domain.models import Transaction, User
from src.cd_common.enums import TransactionStatus
from src.cd_common.errors import InsufficientBalanceError, InternalError, UserNotFoundError
from src.cd_common.id_generator import generate_id

# ---------------------------------------------------------------------------
# SQL: users
# ---------------------------------------------------------------------------

_USER_COLUMNS = """
    id, external_id, email, username, wallet_balance, rating, wins, losses,
    created_at, updated_at
"""

_GET_USER_SQL = text(f"SELECT {_USER_COLUMNS} FROM users WHERE id = :user_id")

_GET_USER_FOR_UPDATE_SQL = text(
    f"SELECT {_USER_COLUMNS} FROM users WHERE id = :user_id FOR UPDATE"
)

_GET_USER_BY_EXTERNAL_SQL = text(
    f"SELECT {_USER_COLUMNS} FROM users WHERE external_id = :external_id"
)

_INSERT_USER_SQL = text(f"""
    INSERT INTO users (id, external_id, email, username, wallet_balance, rating, wins, losses)
    VALUES (:id, :external_id, :email, :username, :wallet_balance, :rating, 0, 0)
    ON CONFLICT (external_id) DO NOTHING
    RETURNING {_USER_COLUMNS}
""")

_DEBIT_SQL = text(f"""
    UPDATE users
    SET wallet_balance = wallet_balance - :amount,
        updated_at = NOW()
    WHERE id = :user_id AND wallet_balance >= :amount
    RETURNING {_USER_COLUMNS}
""")

_CREDIT_SQL = text(f"""
    UPDATE users
    SET wallet_balance = wallet_balance + :amount,
        updated_at = NOW()
    WHERE id = :user_id
    RETURNING {_USER_COLUMNS}
""")

_RECORD_WIN_SQL = text("""
    UPDATE users
    SET wins = wins + 1, rating = :rating, updated_at = NOW()
    WHERE id = :user_id
""")

_RECORD_LOSS_SQL = text("""
    UPDATE users
    SET losses = losses + 1, rating = :rating, updated_at = NOW()
    WHERE id = :user_id
""")

# ---------------------------------------------------------------------------
# SQL: transactions (append-only)
# ---------------------------------------------------------------------------

_TX_COLUMNS = """
    id, user_id, tx_type, amount, balance_after, status, match_id, description, created_at
"""

_INSERT_TX_SQL = text(f"""
    INSERT INTO transactions
        (id, user_id, tx_type, amount, balance_after, status, match_id, description)
    VALUES
        (:id, :user_id, :tx_type, :amount, :balance_after, :status, :match_id, :description)
    RETURNING {_TX_COLUMNS}
""")

_LIST_TX_SQL = text(f"""
    SELECT {_TX_COLUMNS}
    FROM transactions
    WHERE user_id = :user_id
      AND (CAST(:cursor_id AS TEXT) IS NULL
           OR CAST(id AS BIGINT) < CAST(:cursor_id AS BIGINT))
      AND (CAST(:tx_type AS TEXT) IS NULL OR tx_type = :tx_type)
    ORDER BY CAST(id AS BIGINT) DESC
    LIMIT :limit
""")


def _row_to_user(row: Any) -> User:
    return User(
        id=row.id,
        external_id=row.external_id,
        email=row.email,
        username=row.username,
        wallet_balance=row.wallet_balance,
        rating=row.rating,
        wins=row.wins,
        losses=row.losses,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_tx(row: Any) -> Transaction:
    return Transaction(
        id=row.id,
        user_id=row.user_id,
        tx_type=row.tx_type,
        amount=row.amount,
        balance_after=row.balance_after,
        status=row.status,
        match_id=row.match_id,
        description=row.description,
        created_at=row.created_at,
    )


class UserRepository:
    """Concrete repository — all operations atomic at the SQL level."""

    async def get_by_id(self, db: AsyncSession, user_id: str) -> User | None:
        row = (await db.execute(_GET_USER_SQL, {"user_id": user_id})).fetchone()
        return _row_to_user(row) if row else None

    async def get_by_id_for_update(self, db: AsyncSession, user_id: str) -> User | None:
        row = (await db.execute(_GET_USER_FOR_UPDATE_SQL, {"user_id": user_id})).fetchone()
        return _row_to_user(row) if row else None

    async def get_by_external_id(self, db: AsyncSession, external_id: str) -> User | None:
        row = (
            await db.execute(_GET_USER_BY_EXTERNAL_SQL, {"external_id": external_id})
        ).fetchone()
        return _row_to_user(row) if row else None

    async def create(self, db: AsyncSession, user: User) -> User:
        row = (
            await db.execute(
                _INSERT_USER_SQL,
                {
                    "id": user.id,
                    "external_id": user.external_id,
                    "email": user.email,
                    "username": user.username,
                    "wallet_balance": user.wallet_balance,
                    "rating": user.rating,
                },
            )
        ).fetchone()
        if row is not None:
            return _row_to_user(row)
        # Lost a concurrent provisioning race; the other insert won
        existing = await self.get_by_external_id(db, user.external_id)
        if existing is None:
            raise InternalError(f"User insert skipped but no row for {user.external_id}")
        return existing

    async def debit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        tx_type: str,
        match_id: str | None,
        description: str,
    ) -> tuple[User, Transaction]:
        row = (await db.execute(_DEBIT_SQL, {"user_id": user_id, "amount": amount})).fetchone()
        if row is None:
            current = await self.get_by_id(db, user_id)
            if current is None:
                raise UserNotFoundError(user_id)
            raise InsufficientBalanceError(amount, current.wallet_balance)
        user = _row_to_user(row)
        tx = await self._append(db, user, -amount, tx_type, match_id, description)
        return user, tx

    async def credit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        tx_type: str,
        match_id: str | None,
        description: str,
    ) -> tuple[User, Transaction]:
        row = (await db.execute(_CREDIT_SQL, {"user_id": user_id, "amount": amount})).fetchone()
        if row is None:
            raise UserNotFoundError(user_id)
        user = _row_to_user(row)
        tx = await self._append(db, user, amount, tx_type, match_id, description)
        return user, tx

    async def record_win(self, db: AsyncSession, user_id: str, new_rating: int) -> None:
        await db.execute(_RECORD_WIN_SQL, {"user_id": user_id, "rating": new_rating})

    async def record_loss(self, db: AsyncSession, user_id: str, new_rating: int) -> None:
        await db.execute(_RECORD_LOSS_SQL, {"user_id": user_id, "rating": new_rating})

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: str | None,
        limit: int,
        tx_type: str | None,
    ) -> list[Transaction]:
        result = await db.execute(
            _LIST_TX_SQL,
            {"user_id": user_id, "cursor_id": cursor_id, "tx_type": tx_type, "limit": limit},
        )
        return [_row_to_tx(row) for row in result.fetchall()]

    async def _append(
        self,
        db: AsyncSession,
        user: User,
        signed_amount: int,
        tx_type: str,
        match_id: str | None,
        description: str,
    ) -> Transaction:
        row = (
            await db.execute(
                _INSERT_TX_SQL,
                {
                    "id": generate_id(),
                    "user_id": user.id,
                    "tx_type": tx_type,
                    "amount": signed_amount,
                    "balance_after": user.wallet_balance,
                    "status": TransactionStatus.COMPLETED,
                    "match_id": match_id,
                    "description": description,
                },
            )
        ).fetchone()
        if row is None:
            raise InternalError("Transaction insert returned no rows — this should never happen")
        return _row_to_tx(row)
