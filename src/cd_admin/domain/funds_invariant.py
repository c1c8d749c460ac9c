"""Global funds conservation check.

Money only enters the system through deposits, so at any quiescent point:

    Σ wallet balances (players + PLATFORM_FEE)
  + Σ escrow held by ACTIVE matches (2 × entry_fee each)
  == Σ DEPOSIT amounts
"""

import logging
from dataclasses import dataclass, field

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

_WALLET_TOTAL_SQL = text("SELECT COALESCE(SUM(wallet_balance), 0) FROM users")
_ACTIVE_ESCROW_SQL = text(
    "SELECT COALESCE(SUM(entry_fee * 2), 0) FROM matches WHERE status = 'ACTIVE'"
)
_DEPOSIT_TOTAL_SQL = text(
    "SELECT COALESCE(SUM(amount), 0) FROM transactions WHERE tx_type = 'DEPOSIT'"
)


@dataclass
class FundsReport:
    wallet_total: int
    active_escrow: int
    deposit_total: int
    violations: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations


async def verify_funds_invariant(db: AsyncSession) -> FundsReport:
    wallet_total = (await db.execute(_WALLET_TOTAL_SQL)).scalar_one()
    active_escrow = (await db.execute(_ACTIVE_ESCROW_SQL)).scalar_one()
    deposit_total = (await db.execute(_DEPOSIT_TOTAL_SQL)).scalar_one()

    report = FundsReport(
        wallet_total=wallet_total,
        active_escrow=active_escrow,
        deposit_total=deposit_total,
    )
    if wallet_total + active_escrow != deposit_total:
        msg = (
            f"Funds invariant violated: wallets({wallet_total}) + "
            f"active_escrow({active_escrow}) = {wallet_total + active_escrow} "
            f"!= deposits({deposit_total})"
        )
        report.violations.append(msg)
        logger.error(msg)
    return report
