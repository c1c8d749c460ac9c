"""Admin application service — maintenance sweeps and audits."""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.cd_admin.domain.funds_invariant import verify_funds_invariant
from src.cd_match.application.referee import MatchReferee
from src.cd_match.application.service import get_referee
from src.cd_queue.application.matchmaker import Matchmaker
from src.cd_queue.application.service import get_matchmaker

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(
        self,
        matchmaker: Matchmaker | None = None,
        referee: MatchReferee | None = None,
    ) -> None:
        self._matchmaker = matchmaker
        self._referee = referee

    @property
    def matchmaker(self) -> Matchmaker:
        # Resolved lazily so sweeps share the lock held by the API singletons
        return self._matchmaker or get_matchmaker()

    @property
    def referee(self) -> MatchReferee:
        return self._referee or get_referee()

    async def expire_stale_queue(self, db: AsyncSession) -> dict[str, Any]:
        expired = await self.matchmaker.expire_stale_entries(db)
        return {"expired_entries": expired}

    async def expire_stale_matches(self, db: AsyncSession) -> dict[str, Any]:
        expired = await self.referee.expire_stale_matches(db)
        return {"expired_matches": expired}

    async def verify_funds_invariant(self, db: AsyncSession) -> dict[str, Any]:
        report = await verify_funds_invariant(db)
        if report.ok:
            logger.info(
                "Funds invariant holds: wallets=%d escrow=%d deposits=%d",
                report.wallet_total,
                report.active_escrow,
                report.deposit_total,
            )
        return {
            "ok": report.ok,
            "wallet_total": report.wallet_total,
            "active_escrow": report.active_escrow,
            "deposit_total": report.deposit_total,
            "violations": report.violations,
        }
