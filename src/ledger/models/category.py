"""Category model grouping transactions under a unique title."""
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from ledger.models.base import BaseModel


class Category(BaseModel):
    """Category model, unique by title."""

    __tablename__ = "categories"

    title: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, title={self.title!r})>"
