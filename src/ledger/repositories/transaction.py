"""Transaction repository with listing and balance queries."""
from decimal import Decimal
from typing import Sequence

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ledger.models.transaction import Transaction
from ledger.repositories.base import BaseRepository
from ledger.schemas.transaction import Balance


class TransactionRepository(BaseRepository[Transaction]):
    """Repository for Transaction model."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Transaction)

    def create_many(self, records: Sequence[dict]) -> list[Transaction]:
        """Build unsaved transactions from column/relationship values."""
        return self.build_many(records)

    async def get_all_with_category(
        self, skip: int = 0, limit: int = 100
    ) -> list[Transaction]:
        """Get transactions, oldest first, with their category loaded."""
        result = await self.db.execute(
            select(Transaction)
            .options(selectinload(Transaction.category))
            .order_by(Transaction.created_at.asc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        """Count all transactions."""
        result = await self.db.execute(select(func.count(Transaction.id)))
        return result.scalar_one()

    async def get_balance(self) -> Balance:
        """
        Sum income and outcome values across all transactions.
        ``total`` is income minus outcome.
        """
        income_sum = func.coalesce(
            func.sum(case((Transaction.type == "income", Transaction.value), else_=0)), 0
        )
        outcome_sum = func.coalesce(
            func.sum(case((Transaction.type == "outcome", Transaction.value), else_=0)), 0
        )
        result = await self.db.execute(
            select(income_sum.label("income"), outcome_sum.label("outcome"))
        )
        row = result.one()
        income = Decimal(str(row.income))
        outcome = Decimal(str(row.outcome))
        return Balance(income=income, outcome=outcome, total=income - outcome)
