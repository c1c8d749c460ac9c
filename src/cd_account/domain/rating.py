"""Rating engine — fixed-step rating update after a decided match."""

from config.settings import settings


def apply_match_result(
    winner_rating: int,
    loser_rating: int,
    win_delta: int = settings.RATING_WIN_DELTA,
    loss_delta: int = settings.RATING_LOSS_DELTA,
) -> tuple[int, int]:
    """Return (new_winner_rating, new_loser_rating).

    The winner gains `win_delta`; the loser drops by `loss_delta` but never
    below 0. Not zero-sum: the rating pool inflates by the difference.
    """
    return winner_rating + win_delta, max(0, loser_rating - loss_delta)
