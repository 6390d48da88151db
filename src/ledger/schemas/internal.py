"""Internal data schemas for rows read from an import file.

These models hold parsed rows between reading the CSV and building
database records. They are never returned by the API.
"""

from pydantic import BaseModel, Field


class CSVTransaction(BaseModel):
    """A transaction candidate read from one CSV row.

    Fields are already trimmed. ``type`` is passed through as written
    (expected "income" or "outcome") and ``value`` keeps its text form until
    the record is built.
    """

    title: str = Field(..., description="Transaction title")
    type: str = Field(..., description="'income' or 'outcome'")
    value: str = Field(..., description="Numeric value as written in the file")
    category: str = Field("", description="Category title (may be empty)")
