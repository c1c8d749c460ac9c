"""Rating band used to pick eligible opponents."""

from config.settings import settings


def rating_band(rating: int, width: int = settings.RATING_BAND) -> tuple[int, int]:
    """Closed interval [rating - width, rating + width]."""
    return rating - width, rating + width
