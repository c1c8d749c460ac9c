"""Unit tests for ProblemCatalog."""

import random
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.cd_common.errors import ProblemCatalogEmptyError
from src.cd_problem.infrastructure.persistence import ProblemCatalog


def _rows(*ids: str) -> MagicMock:
    result = MagicMock()
    rows = []
    for pid in ids:
        row = MagicMock()
        row.id, row.title, row.difficulty = pid, f"Title {pid}", "MEDIUM"
        rows.append(row)
    result.fetchall.return_value = rows
    return result


async def test_random_pick_from_catalog() -> None:
    db = MagicMock()
    db.execute = AsyncMock(return_value=_rows("PRB-1", "PRB-2", "PRB-3"))

    problem = await ProblemCatalog(rng=random.Random(7)).random_pick(db)

    assert problem.id in {"PRB-1", "PRB-2", "PRB-3"}
    assert problem.title == f"Title {problem.id}"


async def test_random_pick_is_uniform_over_rows() -> None:
    db = MagicMock()
    db.execute = AsyncMock(return_value=_rows("PRB-1", "PRB-2"))
    catalog = ProblemCatalog(rng=random.Random(0))

    picked = {(await catalog.random_pick(db)).id for _ in range(50)}

    assert picked == {"PRB-1", "PRB-2"}


async def test_empty_catalog_raises() -> None:
    db = MagicMock()
    db.execute = AsyncMock(return_value=_rows())

    with pytest.raises(ProblemCatalogEmptyError):
        await ProblemCatalog().random_pick(db)
