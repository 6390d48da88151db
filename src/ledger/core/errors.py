"""Error codes and user-friendly messages.

This module defines the error catalog for transaction imports.
Each error has:
- code: Unique identifier
- message: Technical description (for logs)
- user_message: User-friendly explanation
- suggestion: Actionable guidance for the user
- retry_allowed: Whether the error is retryable
"""

# Error catalog for transaction imports
ERROR_CATALOG: dict[str, dict] = {
    "IO_001": {
        "code": "IO_001",
        "message": "Import file could not be opened or read",
        "user_message": "We couldn't read the uploaded file.",
        "suggestion": "Check that the file exists and is a UTF-8 encoded CSV.",
        "retry_allowed": True,
    },
    "IO_002": {
        "code": "IO_002",
        "message": "Import file could not be deleted after persisting transactions",
        "user_message": "Your transactions were saved, but cleanup failed.",
        "suggestion": "No action is needed for your data. Contact support if this persists.",
        "retry_allowed": False,
    },
    "DB_001": {
        "code": "DB_001",
        "message": "Database operation failed during import",
        "user_message": "We couldn't save your transactions due to a database error.",
        "suggestion": "Please try again in a few moments.",
        "retry_allowed": True,
    },
    "DB_002": {
        "code": "DB_002",
        "message": "Transaction value rejected: not a number",
        "user_message": "One of the transaction values is not a valid number.",
        "suggestion": "Fix the value column in your CSV and upload it again.",
        "retry_allowed": False,
    },
    # API-specific errors
    "API_001": {
        "code": "API_001",
        "message": "Invalid content type uploaded",
        "user_message": "Only CSV files are supported.",
        "suggestion": "Send the file as the request body with Content-Type: text/csv.",
        "retry_allowed": False,
    },
    "API_002": {
        "code": "API_002",
        "message": "File size exceeds maximum limit",
        "user_message": "The file is too large.",
        "suggestion": "Split the CSV into smaller files and import them separately.",
        "retry_allowed": False,
    },
    "API_003": {
        "code": "API_003",
        "message": "Empty upload",
        "user_message": "The uploaded file is empty.",
        "suggestion": "Please upload a CSV with a header row and at least one transaction.",
        "retry_allowed": False,
    },
}


def get_error(error_code: str) -> dict:
    """Get error definition by code.

    Args:
        error_code: Error code from the catalog

    Returns:
        Dict with error details (a generic entry for unknown codes)
    """
    if error_code not in ERROR_CATALOG:
        return {
            "code": "UNKNOWN",
            "message": f"Unknown error code: {error_code}",
            "user_message": "An unexpected error occurred.",
            "suggestion": "Please try again. Contact support if the problem persists.",
            "retry_allowed": True,
        }
    return ERROR_CATALOG[error_code]

