"""UTC datetime utilities."""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def cutoff(now: datetime, seconds: int) -> datetime:
    """Instant `seconds` before `now`; rows created earlier are stale."""
    return now - timedelta(seconds=seconds)
