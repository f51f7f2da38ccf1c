"""
Pydantic schemas for financial transaction endpoints.

Transactions are ledger entries of the ministry treasury: INCOME or EXPENSE,
always with a strictly positive amount (the type carries the sign).
"""

import datetime as dt
from typing import List, Literal, Optional

from pydantic import Field

from backend.schemas.common import AuthorSummary, CamelModel, Pagination, PartialUpdateModel

TransactionType = Literal["INCOME", "EXPENSE"]


# --- Transaction creation models ---

class TransactionCreateRequest(CamelModel):
    """
    Request to record a new transaction.
    """
    description: str = Field(..., min_length=1, description="What the money was for")
    amount: float = Field(
        ...,
        gt=0,
        description="Transaction amount (must be > 0)",
        examples=[150.0, 1200.5]
    )
    type: TransactionType = Field(..., description="INCOME (money in) or EXPENSE (money out)")
    category: Optional[str] = Field(None, description="Free-text category", examples=["Tithes"])
    date: dt.date = Field(
        ...,
        description="ISO-8601 date of the transaction",
        examples=["2025-03-02"]
    )
    proof_url: Optional[str] = Field(None, description="URL of a receipt or other proof")


# --- Transaction update models ---

class TransactionUpdateRequest(PartialUpdateModel):
    """
    Request to update an existing transaction.

    All fields are optional - only provided fields will be updated.
    """
    non_nullable = ("description", "amount", "type", "date")

    description: Optional[str] = Field(None, min_length=1)
    amount: Optional[float] = Field(None, gt=0, description="Updated amount (must be > 0)")
    type: Optional[TransactionType] = None
    category: Optional[str] = None
    date: Optional[dt.date] = None
    proof_url: Optional[str] = None


# --- Transaction response models ---

class TransactionResponse(CamelModel):
    id: str = Field(..., description="Transaction UUID")
    description: str = Field(..., description="What the money was for")
    amount: float = Field(..., description="Transaction amount")
    type: TransactionType = Field(..., description="Money direction")
    category: Optional[str] = None
    date: str = Field(..., description="ISO-8601 date of the transaction")
    proof_url: Optional[str] = None
    author_id: Optional[str] = Field(None, description="UUID of the admin who recorded it")
    author: Optional[AuthorSummary] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class TransactionListResponse(CamelModel):
    """
    Response for GET /transactions - one page of transactions, newest first.
    """
    transactions: List[TransactionResponse]
    pagination: Pagination


class TransactionDetailResponse(CamelModel):
    transaction: TransactionResponse


class TransactionMutationResponse(CamelModel):
    message: str = Field(..., examples=["Transaction created successfully"])
    transaction: TransactionResponse


class FinancialSummary(CamelModel):
    total_income: float = Field(..., description="Sum of INCOME amounts")
    total_expenses: float = Field(..., description="Sum of EXPENSE amounts")
    balance: float = Field(..., description="total_income - total_expenses")
    income_count: int = Field(..., description="Number of INCOME transactions")
    expense_count: int = Field(..., description="Number of EXPENSE transactions")


class FinancialSummaryResponse(CamelModel):
    summary: FinancialSummary
