"""Match settlement — pay the winner, collect the platform fee, update ratings.

Runs inside the caller's transaction, right after the match row moved to
COMPLETED. Draws (timeout) refund both entry fees instead.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from src.cd_account.domain.constants import PLATFORM_FEE_USER_ID
from src.cd_account.domain.rating import apply_match_result
from src.cd_account.domain.repository import UserRepositoryProtocol
from src.cd_common.enums import TransactionType
from src.cd_common.errors import OpponentNotFoundError
from src.cd_match.domain.models import Match

logger = logging.getLogger(__name__)


@dataclass
class Settlement:
    match_id: str
    winner_id: str
    loser_id: str
    prize_pool: int
    platform_fee: int
    winner_rating: int
    loser_rating: int


async def settle_match(
    match: Match,
    winner_id: str,
    users: UserRepositoryProtocol,
    db: AsyncSession,
) -> Settlement:
    loser_id = match.opponent_of(winner_id)

    # Lock both rows in a stable order so concurrent settlements can't deadlock
    locked = {}
    for user_id in sorted((winner_id, loser_id)):
        user = await users.get_by_id_for_update(db, user_id)
        if user is None:
            raise OpponentNotFoundError(user_id)
        locked[user_id] = user
    winner, loser = locked[winner_id], locked[loser_id]

    new_winner_rating, new_loser_rating = apply_match_result(winner.rating, loser.rating)

    await users.credit(
        db,
        winner_id,
        match.prize_pool,
        TransactionType.PRIZE_WIN,
        match.id,
        "Prize for winning match",
    )
    if match.platform_fee > 0:
        await users.credit(
            db,
            PLATFORM_FEE_USER_ID,
            match.platform_fee,
            TransactionType.PLATFORM_FEE,
            match.id,
            "Platform fee",
        )
    await users.record_win(db, winner_id, new_winner_rating)
    await users.record_loss(db, loser_id, new_loser_rating)

    logger.debug(
        "Settled match=%s winner=%s prize=%d fee=%d",
        match.id,
        winner_id,
        match.prize_pool,
        match.platform_fee,
    )
    return Settlement(
        match_id=match.id,
        winner_id=winner_id,
        loser_id=loser_id,
        prize_pool=match.prize_pool,
        platform_fee=match.platform_fee,
        winner_rating=new_winner_rating,
        loser_rating=new_loser_rating,
    )


async def refund_match(
    match: Match,
    users: UserRepositoryProtocol,
    db: AsyncSession,
) -> None:
    """Return each player's entry fee; ratings and win/loss counters untouched."""
    for user_id in sorted((match.player1_id, match.player2_id)):
        await users.credit(
            db,
            user_id,
            match.entry_fee,
            TransactionType.ENTRY_FEE_REFUND,
            match.id,
            "Entry fee refund (match timed out)",
        )
