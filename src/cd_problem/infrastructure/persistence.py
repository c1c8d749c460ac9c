"""ProblemCatalog backed by the `problems` table."""

import random
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.cd_common.errors import ProblemCatalogEmptyError
from src.cd_problem.domain.models import Problem

_LIST_PROBLEMS_SQL = text("SELECT id, title, difficulty FROM problems ORDER BY id")


def _row_to_problem(row: Any) -> Problem:
    return Problem(id=row.id, title=row.title, difficulty=row.difficulty)


class ProblemCatalog:
    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    async def list_all(self, db: AsyncSession) -> list[Problem]:
        result = await db.execute(_LIST_PROBLEMS_SQL)
        return [_row_to_problem(row) for row in result.fetchall()]

    async def random_pick(self, db: AsyncSession) -> Problem:
        problems = await self.list_all(db)
        if not problems:
            raise ProblemCatalogEmptyError()
        return self._rng.choice(problems)
