"""Pydantic schemas for transaction API responses."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CategoryResponse(BaseModel):
    """Category data for API responses."""

    id: UUID
    title: str = Field(description="Unique category title")

    model_config = ConfigDict(from_attributes=True)


class TransactionResponse(BaseModel):
    """Transaction data for API responses."""

    id: UUID
    title: str = Field(description="Transaction title")
    type: str = Field(description="'income' or 'outcome'")
    value: Decimal = Field(description="Transaction value")
    category: CategoryResponse | None = Field(None, description="Referenced category")
    created_at: datetime = Field(description="Creation timestamp")

    model_config = ConfigDict(from_attributes=True)


class Balance(BaseModel):
    """Income and outcome totals across all transactions."""

    income: Decimal = Field(description="Sum of income values")
    outcome: Decimal = Field(description="Sum of outcome values")
    total: Decimal = Field(description="Income minus outcome")


class TransactionListResult(BaseModel):
    """Paginated list of transactions with the overall balance."""

    transactions: list[TransactionResponse]
    balance: Balance
    total: int = Field(description="Total number of transactions")


class ImportResult(BaseModel):
    """Result of importing a CSV file."""

    transactions: list[TransactionResponse]
    count: int = Field(description="Number of transactions persisted")


class ErrorResponse(BaseModel):
    """Error body returned for failed requests."""

    error_code: str = Field(description="Error code from catalog")
    message: str = Field(description="Technical error message (for logging)")
    user_message: str = Field(description="User-friendly error message")
    suggestion: str = Field(description="Actionable guidance")
    retry_allowed: bool = Field(description="Whether the operation can be retried")
