"""
Financial transaction persistence service.

RULES:
1. amount is always > 0; the sign is carried by type (INCOME/EXPENSE)
2. author_id is the authenticated admin, never a client-provided value
3. Listing is newest first (date desc, then created_at desc)
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from supabase import Client

from backend.services.resource_service import TableService
from backend.utils.constants import AUTHOR_EMBED, TRANSACTION_TYPES

logger = logging.getLogger(__name__)

transactions_table = TableService(
    "financial_transactions",
    select=(
        "id,description,amount,type,category,date,proof_url,author_id,"
        f"created_at,updated_at,{AUTHOR_EMBED}"
    ),
    order=(("date", True), ("created_at", True)),
)


def _validate_amount_and_type(amount: Optional[float], flow_type: Optional[str]) -> None:
    if amount is not None and amount <= 0:
        raise ValueError("Amount must be positive")
    if flow_type is not None and flow_type not in TRANSACTION_TYPES:
        raise ValueError(f"Invalid type: {flow_type}. Must be INCOME or EXPENSE")


def _date_range_filter(start_date: Optional[str], end_date: Optional[str]):
    def apply(query):
        if start_date:
            query = query.gte("date", start_date)
        if end_date:
            query = query.lte("date", end_date)
        return query
    return apply


async def list_transactions(
    supabase_client: Client,
    page: int = 1,
    limit: int = 10,
    flow_type: Optional[str] = None,
    category: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> Tuple[List[Dict[str, Any]], int]:
    """
    Fetch one page of transactions with optional filters.

    Args:
        page: 1-based page number
        limit: Page size
        flow_type: Only INCOME or only EXPENSE (other values are ignored)
        category: Case-insensitive substring match on category
        start_date: Inclusive lower bound on date (ISO-8601)
        end_date: Inclusive upper bound on date (ISO-8601)

    Returns:
        (rows, total)
    """
    date_filter = _date_range_filter(start_date, end_date)

    def apply(query):
        if flow_type in TRANSACTION_TYPES:
            query = query.eq("type", flow_type)
        if category:
            query = query.ilike("category", f"%{category}%")
        return date_filter(query)

    rows, total = await transactions_table.list_page(supabase_client, page, limit, apply)

    logger.info(
        f"Fetched {len(rows)} of {total} transactions "
        f"(page={page}, limit={limit}, type={flow_type})"
    )
    return rows, total


async def get_financial_summary(
    supabase_client: Client,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Aggregate income/expense totals over an optional date range.

    Returns:
        {total_income, total_expenses, balance, income_count, expense_count}
    """
    query = supabase_client.table("financial_transactions").select("type,amount")
    query = _date_range_filter(start_date, end_date)(query)
    result = query.execute()

    totals = {"INCOME": 0.0, "EXPENSE": 0.0}
    counts = {"INCOME": 0, "EXPENSE": 0}

    for row in result.data or []:
        flow_type = row.get("type")
        if flow_type not in totals:
            continue
        totals[flow_type] += float(row.get("amount") or 0)
        counts[flow_type] += 1

    return {
        "total_income": totals["INCOME"],
        "total_expenses": totals["EXPENSE"],
        "balance": totals["INCOME"] - totals["EXPENSE"],
        "income_count": counts["INCOME"],
        "expense_count": counts["EXPENSE"],
    }


async def get_transaction_by_id(
    supabase_client: Client,
    transaction_id: str,
) -> Optional[Dict[str, Any]]:
    return await transactions_table.get(supabase_client, transaction_id)


async def create_transaction(
    supabase_client: Client,
    author_id: str,
    description: str,
    amount: float,
    flow_type: str,
    date: str,
    category: Optional[str] = None,
    proof_url: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Record a transaction.

    Raises:
        ValueError: If amount <= 0 or type is not INCOME/EXPENSE
        Exception: If the database operation fails
    """
    _validate_amount_and_type(amount, flow_type)

    created = await transactions_table.create(
        supabase_client,
        {
            "description": description,
            "amount": amount,
            "type": flow_type,
            "category": category,
            "date": date,
            "proof_url": proof_url,
            "author_id": author_id,
        },
    )

    logger.info(f"Transaction created: id={created.get('id')} type={flow_type}")
    return await transactions_table.get(supabase_client, created["id"]) or created


async def update_transaction(
    supabase_client: Client,
    transaction_id: str,
    changes: Dict[str, Any],
) -> Optional[Dict[str, Any]]:
    """
    Partially update a transaction.

    Returns:
        The updated transaction, or None if it does not exist
    """
    _validate_amount_and_type(changes.get("amount"), changes.get("type"))

    existing = await transactions_table.get(supabase_client, transaction_id)
    if existing is None:
        return None
    if not changes:
        return existing

    updated = await transactions_table.update(supabase_client, transaction_id, changes)
    if updated is None:
        return None
    return await transactions_table.get(supabase_client, transaction_id) or updated


async def delete_transaction(supabase_client: Client, transaction_id: str) -> bool:
    return await transactions_table.delete(supabase_client, transaction_id)
