"""Transaction import service.

This module turns a CSV file into persisted transactions:
1. Read and filter every row (the whole file is buffered first)
2. Look up the referenced categories and create the missing ones
3. Build and save the transactions in one batch
4. Delete the source file

Each database write commits on its own. A failure while saving
transactions leaves the categories created in step 2 in place and the
source file on disk.
"""

import asyncio
import csv
import logging
import time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from os import PathLike
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.config import settings
from ledger.core.exceptions import FileReadError, PersistenceError
from ledger.models.category import Category
from ledger.models.transaction import Transaction
from ledger.parsers.csv_rows import read_candidates
from ledger.repositories.category import CategoryRepository
from ledger.repositories.transaction import TransactionRepository
from ledger.schemas.internal import CSVTransaction

logger = logging.getLogger(__name__)

# Scale of the transactions.value column.
VALUE_QUANTUM = Decimal("0.01")


class ImportTransactionsService:
    """Service importing transactions from a CSV file.

    Repositories are built from the session handed in by the caller; nothing
    is looked up from a global registry.
    """

    def __init__(self, db: AsyncSession, encoding: str | None = None):
        """Initialize the service.

        Args:
            db: Database session for persistence
            encoding: Text encoding of import files (defaults to settings)
        """
        self.db = db
        self.encoding = encoding or settings.csv_encoding
        self.category_repo = CategoryRepository(db)
        self.transaction_repo = TransactionRepository(db)

    async def execute(self, file_path: str | PathLike) -> list[Transaction]:
        """Import every transaction in ``file_path`` and delete the file.

        Args:
            file_path: Path of the CSV file to import

        Returns:
            Persisted transactions in file order

        Raises:
            FileReadError: If the file cannot be read (IO_001) or deleted (IO_002)
            PersistenceError: If a database operation fails (DB_001) or a
                value cannot be stored as a number (DB_002)
        """
        path = Path(file_path)
        start_time = time.time()
        logger.info("Starting transaction import", extra={"file_name": path.name})

        candidates = await self._read_candidates(path)
        categories = await self._reconcile_categories(candidates)
        transactions = await self._persist_transactions(candidates, categories)
        await self._delete_file(path)

        logger.info(
            "Import complete",
            extra={
                "transactions_count": len(transactions),
                "duration_ms": int((time.time() - start_time) * 1000),
            },
        )
        return transactions

    async def _read_candidates(self, path: Path) -> list[CSVTransaction]:
        """Buffer every usable row of the file before touching the database."""
        try:
            candidates = await asyncio.to_thread(read_candidates, path, self.encoding)
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            logger.warning(
                "Import file could not be read", extra={"error_type": type(e).__name__}
            )
            raise FileReadError("IO_001", {"file_name": path.name}) from e

        logger.info("Import file read", extra={"candidates_count": len(candidates)})
        return candidates

    async def _reconcile_categories(
        self, candidates: list[CSVTransaction]
    ) -> list[Category]:
        """Create the categories that do not exist yet.

        Returns:
            Newly created categories followed by the pre-existing ones
        """
        titles = [candidate.category for candidate in candidates]

        try:
            existing = await self.category_repo.find_by_titles(titles)
            existing_titles = {category.title for category in existing}

            # First-occurrence order, one entry per missing title.
            missing_titles = list(
                dict.fromkeys(title for title in titles if title not in existing_titles)
            )
            new_categories = self.category_repo.create_many(missing_titles)
            await self.category_repo.save_many(new_categories)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                "Category reconciliation failed", extra={"error_type": type(e).__name__}
            )
            raise PersistenceError("DB_001", {"stage": "categories"}) from e

        logger.info(
            "Categories reconciled",
            extra={
                "existing_categories": len(existing),
                "created_categories": len(new_categories),
            },
        )
        return [*new_categories, *existing]

    async def _persist_transactions(
        self, candidates: list[CSVTransaction], categories: list[Category]
    ) -> list[Transaction]:
        """Build one transaction per candidate and save them in one batch."""
        by_title: dict[str, Category] = {}
        for category in categories:
            by_title.setdefault(category.title, category)

        records = [
            {
                "title": candidate.title,
                "type": candidate.type,
                "value": self._to_decimal(candidate.value),
                # Unmatched titles leave the reference empty.
                "category": by_title.get(candidate.category),
            }
            for candidate in candidates
        ]

        try:
            transactions = self.transaction_repo.create_many(records)
            return await self.transaction_repo.save_many(transactions)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                "Transaction batch save failed", extra={"error_type": type(e).__name__}
            )
            raise PersistenceError("DB_001", {"stage": "transactions"}) from e

    @staticmethod
    def _to_decimal(raw: str) -> Decimal:
        """Convert a value cell to the number the numeric column stores.

        Values are rounded half away from zero to two places, as the column does.
        """
        try:
            value = Decimal(raw)
        except InvalidOperation as e:
            raise PersistenceError("DB_002", {"value": raw}) from e
        if not value.is_finite():
            raise PersistenceError("DB_002", {"value": raw})
        try:
            return value.quantize(VALUE_QUANTUM, rounding=ROUND_HALF_UP)
        except InvalidOperation as e:
            raise PersistenceError("DB_002", {"value": raw}) from e

    async def _delete_file(self, path: Path) -> None:
        try:
            await asyncio.to_thread(path.unlink)
        except OSError as e:
            logger.error(
                "Import file could not be deleted", extra={"error_type": type(e).__name__}
            )
            raise FileReadError("IO_002", {"file_name": path.name}) from e
