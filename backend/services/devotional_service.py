"""
Devotional post persistence service.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from supabase import Client

from backend.schemas.common import utc_now_iso
from backend.services.resource_service import TableService, published_window_filter
from backend.utils.constants import DEVOTIONAL_FREQUENCIES

logger = logging.getLogger(__name__)

devotionals_table = TableService(
    "devotional_posts",
    select="id,title,content,frequency,published_at,created_at,updated_at",
    order=(("published_at", True), ("created_at", True)),
)


def _check_frequency(frequency: Optional[str]) -> None:
    if frequency is not None and frequency not in DEVOTIONAL_FREQUENCIES:
        raise ValueError("Frequency must be WEEKLY or MONTHLY")


async def list_devotionals(
    supabase_client: Client,
    page: int = 1,
    limit: int = 10,
    q: Optional[str] = None,
    frequency: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> Tuple[List[Dict[str, Any]], int]:
    """
    Fetch one page of devotionals, newest publication first.

    Returns:
        (rows, total)
    """
    apply = published_window_filter(
        q=q,
        start_date=start_date,
        end_date=end_date,
        extra={"frequency": frequency},
    )
    return await devotionals_table.list_page(supabase_client, page, limit, apply)


async def get_devotional_by_id(supabase_client: Client, devotional_id: str) -> Optional[Dict[str, Any]]:
    return await devotionals_table.get(supabase_client, devotional_id)


async def create_devotional(supabase_client: Client, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Insert a devotional.

    Raises:
        ValueError: If frequency is not WEEKLY/MONTHLY
    """
    _check_frequency(data.get("frequency"))

    payload = dict(data)
    if not payload.get("published_at"):
        payload["published_at"] = utc_now_iso()

    created = await devotionals_table.create(supabase_client, payload)
    logger.info(f"Devotional created: id={created.get('id')} frequency={payload.get('frequency')}")
    return created


async def update_devotional(
    supabase_client: Client,
    devotional_id: str,
    changes: Dict[str, Any],
) -> Optional[Dict[str, Any]]:
    _check_frequency(changes.get("frequency"))

    if not changes:
        return await devotionals_table.get(supabase_client, devotional_id)
    return await devotionals_table.update(supabase_client, devotional_id, changes)


async def delete_devotional(supabase_client: Client, devotional_id: str) -> bool:
    return await devotionals_table.delete(supabase_client, devotional_id)
