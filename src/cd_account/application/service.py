"""AccountApplicationService — user provisioning and wallet operations.

Mutating operations commit on success and roll back on any error.
Read-only operations run without an explicit transaction.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.cd_account.application.schemas import (
    CreateUserResponse,
    DepositResponse,
    ProfileResponse,
    TransactionItem,
    TransactionListResponse,
    cursor_decode,
    cursor_encode,
)
from src.cd_account.domain.models import User
from src.cd_account.domain.repository import UserRepositoryProtocol
from src.cd_account.infrastructure.persistence import UserRepository
from src.cd_common.cents import cents_to_display
from src.cd_common.enums import TransactionType
from src.cd_common.errors import InvalidAmountError, UserNotFoundError
from src.cd_common.id_generator import generate_id
from src.cd_common.telemetry import ErrorReporter, get_reporter, report_failure


class AccountApplicationService:
    def __init__(
        self,
        repo: UserRepositoryProtocol | None = None,
        reporter: ErrorReporter | None = None,
    ) -> None:
        self._repo: UserRepositoryProtocol = repo or UserRepository()
        self._reporter = reporter or get_reporter()

    async def create_user(
        self, db: AsyncSession, external_id: str, email: str, username: str
    ) -> CreateUserResponse:
        """Provision a user for an identity-provider subject. Idempotent."""
        try:
            existing = await self._repo.get_by_external_id(db, external_id)
            if existing is not None:
                return CreateUserResponse(user_id=existing.id, created=False)
            candidate = User(
                id=generate_id(),
                external_id=external_id,
                email=email,
                username=username,
                wallet_balance=0,
                rating=settings.INITIAL_RATING,
            )
            user = await self._repo.create(db, candidate)
            await db.commit()
        except Exception as exc:
            await db.rollback()
            report_failure(
                self._reporter, "create_user", {"external_id": external_id, "email": email}, exc
            )
            raise
        return CreateUserResponse(user_id=user.id, created=user.id == candidate.id)

    async def get_profile(self, db: AsyncSession, user_id: str) -> ProfileResponse:
        user = await self._repo.get_by_id(db, user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return ProfileResponse.from_user(user)

    async def deposit(
        self, db: AsyncSession, user_id: str, amount_cents: int
    ) -> DepositResponse:
        """Simulated top-up; the payment provider checkout is external."""
        if amount_cents <= 0:
            raise InvalidAmountError(amount_cents)
        try:
            user, tx = await self._repo.credit(
                db,
                user_id,
                amount_cents,
                TransactionType.DEPOSIT,
                None,
                f"Wallet deposit of {cents_to_display(amount_cents)}",
            )
            await db.commit()
        except Exception as exc:
            await db.rollback()
            report_failure(
                self._reporter, "deposit", {"user_id": user_id, "amount": amount_cents}, exc
            )
            raise
        return DepositResponse(
            wallet_balance_cents=user.wallet_balance,
            wallet_balance_display=cents_to_display(user.wallet_balance),
            deposited_cents=amount_cents,
            transaction_id=tx.id,
        )

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        cursor: str | None,
        limit: int,
        tx_type: str | None,
    ) -> TransactionListResponse:
        cursor_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        txs = await self._repo.list_transactions(db, user_id, cursor_id, limit + 1, tx_type)
        has_more = len(txs) > limit
        page = txs[:limit]
        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return TransactionListResponse(
            items=[TransactionItem.from_tx(tx) for tx in page],
            next_cursor=next_cursor,
            has_more=has_more,
        )
