"""Integration tests for the CSV import against a real database."""
from decimal import Decimal
from unittest.mock import patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.core.exceptions import PersistenceError
from ledger.models.category import Category
from ledger.models.transaction import Transaction
from ledger.repositories.category import CategoryRepository
from ledger.services.import_transactions import ImportTransactionsService


async def _category_titles(db_session: AsyncSession) -> list[str]:
    result = await db_session.execute(select(Category.title).order_by(Category.title))
    return list(result.scalars().all())


async def _transaction_count(db_session: AsyncSession) -> int:
    result = await db_session.execute(select(func.count(Transaction.id)))
    return result.scalar_one()


class TestImportTransactions:
    """End-to-end behaviour of ImportTransactionsService."""

    async def test_scenario_import(self, db_session: AsyncSession, write_csv):
        """Two rows, two new categories, file removed."""
        path = write_csv(
            "title,type,value,category\n"
            " Rent,outcome,1200,Housing\n"
            " Freelance, income , 900, Work \n"
        )

        transactions = await ImportTransactionsService(db_session).execute(path)

        assert [(t.title, t.type, t.value, t.category.title) for t in transactions] == [
            ("Rent", "outcome", Decimal("1200"), "Housing"),
            ("Freelance", "income", Decimal("900"), "Work"),
        ]
        assert all(t.id is not None for t in transactions)
        assert await _category_titles(db_session) == ["Housing", "Work"]
        assert await _transaction_count(db_session) == 2
        assert not path.exists()

    async def test_count_matches_rows_with_required_fields(
        self, db_session: AsyncSession, write_csv
    ):
        """Rows missing title, type or value are not persisted."""
        path = write_csv(
            "title,type,value,category\n"
            ",outcome,500,Housing\n"
            "Rent,outcome,1200,Housing\n"
            "Bonus,income,,Work\n"
            "Lunch,outcome,15,Food\n"
        )

        transactions = await ImportTransactionsService(db_session).execute(path)

        assert len(transactions) == 2
        assert await _transaction_count(db_session) == 2

    async def test_same_category_same_entity(self, db_session: AsyncSession, write_csv):
        """Rows sharing a category name reference one stored category."""
        path = write_csv(
            "title,type,value,category\n"
            "Lunch,outcome,15,Food\n"
            "Dinner,outcome,30,Food\n"
            "Snack,outcome,4,Food\n"
        )

        transactions = await ImportTransactionsService(db_session).execute(path)

        assert len({t.category_id for t in transactions}) == 1
        assert await _category_titles(db_session) == ["Food"]

    async def test_existing_category_reused(self, db_session: AsyncSession, write_csv):
        """A stored category keeps its identity."""
        repo = CategoryRepository(db_session)
        [housing] = await repo.save_many(repo.create_many(["Housing"]))
        path = write_csv("title,type,value,category\nRent,outcome,1200,Housing\n")

        transactions = await ImportTransactionsService(db_session).execute(path)

        assert transactions[0].category_id == housing.id
        assert await _category_titles(db_session) == ["Housing"]

    async def test_two_runs_share_categories(self, db_session: AsyncSession, write_csv):
        """A second import resolves to the categories of the first."""
        first = write_csv(
            "title,type,value,category\n"
            "Rent,outcome,1200,Housing\n"
            "Salary,income,3000,Work\n"
        )
        second = write_csv(
            "title,type,value,category\n"
            "Repairs,outcome,150,Housing\n"
            "Groceries,outcome,80,Food\n"
        )
        service = ImportTransactionsService(db_session)

        first_run = await service.execute(first)
        second_run = await service.execute(second)

        assert second_run[0].category_id == first_run[0].category_id
        assert await _category_titles(db_session) == ["Food", "Housing", "Work"]
        assert await _transaction_count(db_session) == 4

    async def test_failed_save_keeps_file_and_categories(
        self, db_session: AsyncSession, write_csv
    ):
        """Categories stay and the file is kept when the transaction write fails."""
        path = write_csv("title,type,value,category\nRent,outcome,1200,Housing\n")
        service = ImportTransactionsService(db_session)

        with patch.object(
            service.transaction_repo,
            "save_many",
            side_effect=OperationalError("INSERT", {}, Exception("disk full")),
        ):
            with pytest.raises(PersistenceError):
                await service.execute(path)

        assert path.exists()
        assert await _category_titles(db_session) == ["Housing"]
        assert await _transaction_count(db_session) == 0

    async def test_header_only_file(self, db_session: AsyncSession, write_csv):
        """A file with only a header imports nothing and is still deleted."""
        path = write_csv("title,type,value,category\n")

        transactions = await ImportTransactionsService(db_session).execute(path)

        assert transactions == []
        assert await _category_titles(db_session) == []
        assert not path.exists()

    async def test_values_returned_as_stored(self, db_session: AsyncSession, write_csv):
        """Returned values carry the column's two-place scale."""
        path = write_csv("title,type,value,category\nCoffee,outcome,12.345,Food\n")

        [transaction] = await ImportTransactionsService(db_session).execute(path)
        returned = transaction.value

        db_session.expire_all()
        stored = await db_session.get(Transaction, transaction.id)

        assert returned == Decimal("12.35")
        assert stored.value == returned
