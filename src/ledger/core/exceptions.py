"""Custom exception classes for transaction imports.

Each exception carries an error_code defined in errors.py. The originating
exception (``OSError``, ``SQLAlchemyError``) is kept as ``__cause__``.
"""

from typing import Any


class TransactionImportError(Exception):
    """Base exception for all transaction import errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "IO_001")
        details: Additional context about the error (for logging)
        http_status: HTTP status code to return (default: 500)
    """

    def __init__(
        self,
        error_code: str,
        details: dict[str, Any] | None = None,
        http_status: int = 500,
    ):
        self.error_code = error_code
        self.details = details or {}
        self.http_status = http_status
        super().__init__(error_code)


class FileReadError(TransactionImportError, OSError):
    """Raised when the import file cannot be opened, read or deleted.

    Also an ``OSError``, so callers handling plain I/O failures still catch it.

    Codes:
    - IO_001: open/read failure (nothing has been persisted yet)
    - IO_002: delete failure after transactions were saved
    """

    pass


class PersistenceError(TransactionImportError):
    """Raised when a database operation fails during an import.

    Categories committed before the failure are kept; the source file is
    left in place.
    """

    pass


class UploadError(TransactionImportError):
    """Raised when an uploaded request body is not acceptable."""

    def __init__(self, error_code: str, details: dict[str, Any] | None = None):
        super().__init__(error_code, details, http_status=400)
