"""FastAPI dependency injection for database access and services."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.db.session import get_db
from ledger.repositories.transaction import TransactionRepository
from ledger.services.import_transactions import ImportTransactionsService

__all__ = ["get_db", "get_transaction_repository", "get_import_service"]


async def get_transaction_repository(
    db: AsyncSession = Depends(get_db),
) -> TransactionRepository:
    """Get transaction repository instance."""
    return TransactionRepository(db)


async def get_import_service(
    db: AsyncSession = Depends(get_db),
) -> ImportTransactionsService:
    """
    Get import service instance bound to the request's session.

    Args:
        db: Database session

    Returns:
        ImportTransactionsService instance
    """
    return ImportTransactionsService(db)
