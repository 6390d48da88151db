"""Transaction endpoints for CSV import and listing."""

import asyncio
import logging
from pathlib import Path
from typing import Annotated
from uuid import uuid4

from fastapi import APIRouter, Depends, Query, Request, status

from ledger.api.deps import get_import_service, get_transaction_repository
from ledger.config import settings
from ledger.core.exceptions import UploadError
from ledger.repositories.transaction import TransactionRepository
from ledger.schemas.transaction import (
    ErrorResponse,
    ImportResult,
    TransactionListResult,
    TransactionResponse,
)
from ledger.services.import_transactions import ImportTransactionsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transactions", tags=["transactions"])

# Constants
CSV_CONTENT_TYPES = {"text/csv", "application/csv"}


async def _store_upload(request: Request) -> Path:
    """Write the request body to a fresh file under the upload directory.

    Raises:
        UploadError: API_001 wrong content type, API_002 too large, API_003 empty
    """
    content_type = (request.headers.get("content-type") or "").split(";")[0].strip()
    if content_type.lower() not in CSV_CONTENT_TYPES:
        raise UploadError("API_001", {"content_type": content_type})

    # Read request body in-memory with a strict size cap.
    max_bytes = settings.upload_max_size_mb * 1024 * 1024
    buf = bytearray()
    async for chunk in request.stream():
        if not chunk:
            continue
        if len(buf) + len(chunk) > max_bytes:
            raise UploadError("API_002", {"max_bytes": max_bytes})
        buf.extend(chunk)

    if not buf:
        raise UploadError("API_003")

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    path = upload_dir / f"{uuid4().hex}.csv"
    await asyncio.to_thread(path.write_bytes, bytes(buf))
    return path


@router.post(
    "/import",
    response_model=ImportResult,
    status_code=status.HTTP_201_CREATED,
    summary="Import transactions from CSV",
    description="""
    Import transactions from a CSV file sent as the raw request body
    (`Content-Type: text/csv`).

    ## File Format
    - First line is a header and is always skipped
    - Columns: title, type (`income`/`outcome`), value, category
    - Rows missing a title, type or value are skipped
    - Categories that do not exist yet are created once each

    ## Error Codes
    - API_001: Invalid content type
    - API_002: File too large
    - API_003: Empty file
    - DB_002: A value is not a number
    """,
    responses={
        201: {"description": "Transactions imported"},
        400: {"description": "Invalid upload", "model": ErrorResponse},
        500: {"description": "Import failed", "model": ErrorResponse},
    },
)
async def import_transactions(
    request: Request,
    service: ImportTransactionsService = Depends(get_import_service),
) -> ImportResult:
    """
    Store the uploaded CSV and import it.

    The stored file is deleted by the import once the transactions are
    saved; it stays on disk when the import fails.
    """
    path = await _store_upload(request)
    transactions = await service.execute(path)

    return ImportResult(
        transactions=[TransactionResponse.model_validate(t) for t in transactions],
        count=len(transactions),
    )


@router.get(
    "",
    response_model=TransactionListResult,
    summary="List transactions with balance",
)
async def list_transactions(
    skip: Annotated[int, Query(ge=0, description="Number of transactions to skip")] = 0,
    limit: Annotated[int, Query(ge=1, le=500, description="Items per page (1-500)")] = 100,
    repo: TransactionRepository = Depends(get_transaction_repository),
) -> TransactionListResult:
    """List transactions, oldest first, with the income/outcome balance."""
    transactions = await repo.get_all_with_category(skip=skip, limit=limit)
    balance = await repo.get_balance()
    total = await repo.count()

    return TransactionListResult(
        transactions=[TransactionResponse.model_validate(t) for t in transactions],
        balance=balance,
        total=total,
    )
