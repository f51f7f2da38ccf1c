"""
Generic table service.

Every resource in this backend is a PostgREST table with the same access
pattern (list, get by id, insert, partial update, delete by id). TableService
captures that pattern once; entity services configure it with their table
name, select list and default ordering, then add their own rules on top.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, cast

from supabase import Client

from backend.schemas.common import page_bounds, utc_now_iso

logger = logging.getLogger(__name__)

# A filter hook receives a PostgREST request builder and returns it refined
QueryFilter = Callable[[Any], Any]


class TableService:
    """
    CRUD operations over one PostgREST table.

    Args:
        table: Table name (e.g. "events")
        select: Column list / embedding expression used for reads
        order: Default ordering as (column, descending) pairs
        timestamps: Whether to stamp created_at/updated_at on writes
    """

    def __init__(
        self,
        table: str,
        select: str = "*",
        order: Sequence[Tuple[str, bool]] = (),
        timestamps: bool = True,
    ) -> None:
        self.table = table
        self.select = select
        self.order = tuple(order)
        self.timestamps = timestamps

    def _ordered(self, query: Any) -> Any:
        for column, descending in self.order:
            query = query.order(column, desc=descending)
        return query

    async def list(
        self,
        supabase_client: Client,
        apply_filters: Optional[QueryFilter] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Fetch all rows matching the filters, in the default order."""
        query = supabase_client.table(self.table).select(self.select)
        if apply_filters is not None:
            query = apply_filters(query)
        query = self._ordered(query)
        if limit is not None:
            query = query.limit(limit)

        result = query.execute()
        return cast(List[Dict[str, Any]], result.data or [])

    async def list_page(
        self,
        supabase_client: Client,
        page: int,
        limit: int,
        apply_filters: Optional[QueryFilter] = None,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """
        Fetch one page of rows plus the exact total count.

        Returns:
            (rows, total) where total counts every row matching the filters
        """
        start, end = page_bounds(page, limit)

        query = supabase_client.table(self.table).select(self.select, count="exact")
        if apply_filters is not None:
            query = apply_filters(query)
        query = self._ordered(query).range(start, end)

        result = query.execute()
        rows = cast(List[Dict[str, Any]], result.data or [])
        total = result.count if result.count is not None else len(rows)

        logger.debug(f"{self.table}: page={page} limit={limit} total={total}")
        return rows, total

    async def get(self, supabase_client: Client, row_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a single row by id, or None."""
        result = (
            supabase_client.table(self.table)
            .select(self.select)
            .eq("id", row_id)
            .limit(1)
            .execute()
        )

        if not result.data:
            return None
        return cast(Dict[str, Any], result.data[0])

    async def exists(self, supabase_client: Client, row_id: str) -> bool:
        result = (
            supabase_client.table(self.table)
            .select("id")
            .eq("id", row_id)
            .limit(1)
            .execute()
        )
        return bool(result.data)

    async def create(self, supabase_client: Client, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a row and return it as stored.

        Raises:
            Exception: If the insert returns no representation
        """
        payload = dict(data)
        if self.timestamps:
            now = utc_now_iso()
            payload.setdefault("created_at", now)
            payload.setdefault("updated_at", now)

        result = supabase_client.table(self.table).insert(payload).execute()

        if not result.data:
            raise Exception(f"Failed to insert into {self.table}: no data returned")

        created = cast(Dict[str, Any], result.data[0])
        logger.info(f"{self.table}: created id={created.get('id')}")
        return created

    async def update(
        self,
        supabase_client: Client,
        row_id: str,
        data: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        """Apply a partial update; returns the updated row or None if absent."""
        payload = dict(data)
        if self.timestamps:
            payload["updated_at"] = utc_now_iso()

        result = (
            supabase_client.table(self.table)
            .update(payload)
            .eq("id", row_id)
            .execute()
        )

        if not result.data:
            return None

        logger.info(f"{self.table}: updated id={row_id} fields={sorted(data.keys())}")
        return cast(Dict[str, Any], result.data[0])

    async def delete(self, supabase_client: Client, row_id: str) -> bool:
        """Delete a row by id; returns False when nothing was deleted."""
        result = supabase_client.table(self.table).delete().eq("id", row_id).execute()
        deleted = bool(result.data)
        logger.info(f"{self.table}: delete id={row_id} deleted={deleted}")
        return deleted


def published_window_filter(
    q: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    search_columns: Sequence[str] = ("title", "content"),
    extra: Optional[Dict[str, Optional[str]]] = None,
) -> QueryFilter:
    """
    Build the filter hook shared by the published-content listings.

    Args:
        q: Case-insensitive substring matched against any of search_columns
        start_date: Inclusive lower bound on published_at
        end_date: Inclusive upper bound on published_at
        search_columns: Columns searched by q
        extra: Exact-match filters; None values are skipped
    """
    def apply(query: Any) -> Any:
        if q and q.strip():
            # PostgREST or-filter syntax reserves commas and parentheses
            term = q.strip().replace(",", " ").replace("(", " ").replace(")", " ")
            query = query.or_(",".join(f"{col}.ilike.*{term}*" for col in search_columns))
        for column, value in (extra or {}).items():
            if value:
                query = query.eq(column, value)
        if start_date:
            query = query.gte("published_at", start_date)
        if end_date:
            query = query.lte("published_at", end_date)
        return query
    return apply
