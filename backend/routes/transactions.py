"""
Financial transaction API endpoints.

Provides endpoints for the ministry treasury ledger (income/expense).
Reads (list, summary, detail) are open to any authenticated user;
create/update/delete require ADMIN.
"""

import logging
from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Query, status

from backend.auth.dependencies import AdminUser, CurrentUser
from backend.db.client import get_supabase_client
from backend.routes.errors import bad_request, not_found, server_error
from backend.schemas.common import MessageResponse, build_pagination, iso_date
from backend.schemas.transactions import (
    FinancialSummary,
    FinancialSummaryResponse,
    TransactionCreateRequest,
    TransactionDetailResponse,
    TransactionListResponse,
    TransactionMutationResponse,
    TransactionResponse,
    TransactionUpdateRequest,
)
from backend.services.transaction_service import (
    create_transaction,
    delete_transaction,
    get_financial_summary,
    get_transaction_by_id,
    list_transactions,
    update_transaction,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get(
    "",
    response_model=TransactionListResponse,
    summary="List transactions",
    description="""
    Retrieve one page of transactions, newest first.

    Filters:
    - type: INCOME or EXPENSE
    - category: case-insensitive substring match
    - startDate / endDate: inclusive date range

    Pagination metadata reports the total number of matching rows and
    pages = ceil(total / limit).
    """
)
async def list_all_transactions(
    auth_user: CurrentUser,
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(10, ge=1, le=100, description="Page size"),
    type: Optional[Literal["INCOME", "EXPENSE"]] = Query(None, description="Filter by type"),
    category: Optional[str] = Query(None, description="Filter by category (substring)"),
    start_date: Optional[date] = Query(None, alias="startDate", description="Inclusive start date"),
    end_date: Optional[date] = Query(None, alias="endDate", description="Inclusive end date"),
) -> TransactionListResponse:
    supabase_client = get_supabase_client()

    try:
        rows, total = await list_transactions(
            supabase_client,
            page=page,
            limit=limit,
            flow_type=type,
            category=category,
            start_date=iso_date(start_date),
            end_date=iso_date(end_date),
        )
    except Exception as e:
        logger.error(f"Failed to fetch transactions: {e}", exc_info=True)
        raise server_error("fetch_error", "Failed to retrieve transactions from database")

    return TransactionListResponse(
        transactions=[TransactionResponse.model_validate(r) for r in rows],
        pagination=build_pagination(page, limit, total),
    )


@router.get(
    "/summary",
    response_model=FinancialSummaryResponse,
    summary="Income/expense totals",
)
async def get_summary(
    auth_user: CurrentUser,
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
) -> FinancialSummaryResponse:
    """Totals, counts and balance over an optional date range."""
    supabase_client = get_supabase_client()

    try:
        summary = await get_financial_summary(supabase_client, iso_date(start_date), iso_date(end_date))
    except Exception as e:
        logger.error(f"Failed to compute financial summary: {e}", exc_info=True)
        raise server_error("fetch_error", "Failed to fetch financial summary")

    return FinancialSummaryResponse(summary=FinancialSummary.model_validate(summary))


@router.get(
    "/{transaction_id}",
    response_model=TransactionDetailResponse,
    summary="Get transaction details",
)
async def get_transaction(transaction_id: str, auth_user: CurrentUser) -> TransactionDetailResponse:
    supabase_client = get_supabase_client()

    try:
        transaction = await get_transaction_by_id(supabase_client, transaction_id)
    except Exception as e:
        logger.error(f"Failed to fetch transaction {transaction_id}: {e}", exc_info=True)
        raise server_error("fetch_error", "Failed to retrieve transaction from database")

    if transaction is None:
        raise not_found("Transaction", transaction_id)

    return TransactionDetailResponse(transaction=TransactionResponse.model_validate(transaction))


@router.post(
    "",
    response_model=TransactionMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a transaction",
)
async def create_transaction_record(
    request: TransactionCreateRequest,
    auth_user: AdminUser,
) -> TransactionMutationResponse:
    """
    Record a new transaction.

    The author is always the authenticated admin. amount <= 0 or an unknown
    type is rejected with 400 before anything is written.
    """
    logger.info(f"Creating transaction for admin {auth_user.user_id}, type={request.type}")

    supabase_client = get_supabase_client()

    try:
        transaction = await create_transaction(
            supabase_client,
            author_id=auth_user.user_id,
            description=request.description,
            amount=request.amount,
            flow_type=request.type,
            date=request.date.isoformat(),
            category=request.category,
            proof_url=request.proof_url,
        )
    except ValueError as e:
        logger.error(f"Invalid transaction data: {e}")
        raise bad_request(str(e))
    except Exception as e:
        logger.error(f"Failed to create transaction: {e}", exc_info=True)
        raise server_error("persistence_error", "Failed to save transaction to database")

    return TransactionMutationResponse(
        message="Transaction created successfully",
        transaction=TransactionResponse.model_validate(transaction),
    )


@router.put(
    "/{transaction_id}",
    response_model=TransactionMutationResponse,
    summary="Update a transaction",
)
async def update_transaction_record(
    transaction_id: str,
    request: TransactionUpdateRequest,
    auth_user: AdminUser,
) -> TransactionMutationResponse:
    supabase_client = get_supabase_client()

    try:
        transaction = await update_transaction(
            supabase_client,
            transaction_id,
            request.to_row(exclude_unset=True),
        )
    except ValueError as e:
        raise bad_request(str(e))
    except Exception as e:
        logger.error(f"Failed to update transaction {transaction_id}: {e}", exc_info=True)
        raise server_error("update_error", "Failed to update transaction")

    if transaction is None:
        raise not_found("Transaction", transaction_id)

    return TransactionMutationResponse(
        message="Transaction updated successfully",
        transaction=TransactionResponse.model_validate(transaction),
    )


@router.delete(
    "/{transaction_id}",
    response_model=MessageResponse,
    summary="Delete a transaction",
)
async def delete_transaction_record(transaction_id: str, auth_user: AdminUser) -> MessageResponse:
    supabase_client = get_supabase_client()

    try:
        deleted = await delete_transaction(supabase_client, transaction_id)
    except Exception as e:
        logger.error(f"Failed to delete transaction {transaction_id}: {e}", exc_info=True)
        raise server_error("delete_error", "Failed to delete transaction")

    if not deleted:
        raise not_found("Transaction", transaction_id)

    return MessageResponse(message="Transaction deleted successfully")
