"""Base repository with generic persistence operations."""
from typing import Generic, Sequence, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from ledger.models.base import BaseModel

T = TypeVar("T", bound=BaseModel)


class BaseRepository(Generic[T]):
    """Generic repository providing persistence operations for any model."""

    def __init__(self, db: AsyncSession, model: Type[T]):
        self.db = db
        self.model = model

    def build_many(self, rows: Sequence[dict]) -> list[T]:
        """Build unsaved model instances, one per row of column values."""
        return [self.model(**row) for row in rows]

    async def save_many(self, objs: Sequence[T]) -> list[T]:
        """Persist several records in one commit.

        Identities are assigned on flush, so the returned objects carry their
        ids without a refresh round trip per record.
        """
        if not objs:
            return []
        self.db.add_all(objs)
        await self.db.commit()
        return list(objs)
