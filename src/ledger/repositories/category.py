"""Category repository with title lookups."""
from typing import Iterable, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.models.category import Category
from ledger.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """Repository for Category model."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Category)

    async def find_by_titles(self, titles: Iterable[str]) -> list[Category]:
        """Get every category whose title is in ``titles`` (one query).

        Each distinct title is one bind parameter, so the driver limit
        (32767 for asyncpg) caps how many distinct categories one import can
        reference.
        """
        titles = set(titles)
        if not titles:
            return []
        result = await self.db.execute(
            select(Category).where(Category.title.in_(sorted(titles)))
        )
        return list(result.scalars().all())

    def create_many(self, titles: Sequence[str]) -> list[Category]:
        """Build unsaved categories, one per title, in the given order."""
        return self.build_many([{"title": title} for title in titles])
