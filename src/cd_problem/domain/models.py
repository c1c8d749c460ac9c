"""Domain models for cd_problem."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Problem:
    id: str
    title: str
    difficulty: str  # EASY / MEDIUM / HARD
