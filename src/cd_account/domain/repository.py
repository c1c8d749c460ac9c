"""Repository Protocol — dependency inversion for testability.

Unit tests inject an in-memory fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.cd_account.domain.models import Transaction, User


class UserRepositoryProtocol(Protocol):
    async def get_by_id(self, db: AsyncSession, user_id: str) -> User | None: ...

    async def get_by_id_for_update(self, db: AsyncSession, user_id: str) -> User | None: ...

    async def get_by_external_id(self, db: AsyncSession, external_id: str) -> User | None: ...

    async def create(self, db: AsyncSession, user: User) -> User: ...

    async def debit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        tx_type: str,
        match_id: str | None,
        description: str,
    ) -> tuple[User, Transaction]: ...

    async def credit(
        self,
        db: AsyncSession,
        user_id: str,
        amount: int,
        tx_type: str,
        match_id: str | None,
        description: str,
    ) -> tuple[User, Transaction]: ...

    async def record_win(self, db: AsyncSession, user_id: str, new_rating: int) -> None: ...

    async def record_loss(self, db: AsyncSession, user_id: str, new_rating: int) -> None: ...

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: str | None,
        limit: int,
        tx_type: str | None,
    ) -> list[Transaction]: ...
