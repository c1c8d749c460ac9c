"""ProblemCatalog Protocol — the catalog is an external collaborator."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.cd_problem.domain.models import Problem


class ProblemCatalogProtocol(Protocol):
    async def list_all(self, db: AsyncSession) -> list[Problem]: ...

    async def random_pick(self, db: AsyncSession) -> Problem:
        """Uniform pick over the whole catalog; ProblemCatalogEmptyError if none."""
        ...
