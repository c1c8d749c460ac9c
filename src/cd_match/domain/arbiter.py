"""Submission arbiter — decides whether a submission resolves a match.

Pure function over the caller's verdict and the opponent's latest known
submission. The caller holds the per-match lock, so `opponent` reflects the
committed state at decision time.

| caller    | opponent          | winner                         |
|-----------|-------------------|--------------------------------|
| correct   | none              | caller                         |
| correct   | incorrect         | caller                         |
| correct   | correct           | earlier submit time            |
| incorrect | correct           | opponent                       |
| incorrect | none / incorrect  | undecided (match stays ACTIVE) |

Equal submit times go to the lexicographically smaller user id.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Verdict:
    user_id: str
    is_correct: bool
    submitted_at: datetime


def decide_winner(caller: Verdict, opponent: Verdict | None) -> str | None:
    """Return the winner's user id, or None when the match stays open."""
    if not caller.is_correct:
        if opponent is not None and opponent.is_correct:
            return opponent.user_id
        return None

    if opponent is None or not opponent.is_correct:
        return caller.user_id

    if caller.submitted_at != opponent.submitted_at:
        earlier = caller if caller.submitted_at < opponent.submitted_at else opponent
        return earlier.user_id
    return min(caller.user_id, opponent.user_id)
