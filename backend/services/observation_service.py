"""
Observation persistence service.

Observations carry their author (the admin who published them) embedded
on every read.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from supabase import Client

from backend.schemas.common import utc_now_iso
from backend.services.resource_service import TableService, published_window_filter
from backend.utils.constants import AUTHOR_EMBED

logger = logging.getLogger(__name__)

observations_table = TableService(
    "observations",
    select=(
        "id,title,content,category,published_at,author_id,created_at,updated_at,"
        f"{AUTHOR_EMBED}"
    ),
    order=(("published_at", True), ("created_at", True)),
)


async def list_observations(
    supabase_client: Client,
    page: int = 1,
    limit: int = 10,
    q: Optional[str] = None,
    category: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> Tuple[List[Dict[str, Any]], int]:
    apply = published_window_filter(
        q=q,
        start_date=start_date,
        end_date=end_date,
        extra={"category": category},
    )
    return await observations_table.list_page(supabase_client, page, limit, apply)


async def get_observation_by_id(supabase_client: Client, observation_id: str) -> Optional[Dict[str, Any]]:
    return await observations_table.get(supabase_client, observation_id)


async def create_observation(
    supabase_client: Client,
    author_id: str,
    data: Dict[str, Any],
) -> Dict[str, Any]:
    """Insert an observation authored by author_id and return it with the author embedded."""
    payload = dict(data)
    payload["author_id"] = author_id
    if not payload.get("published_at"):
        payload["published_at"] = utc_now_iso()
    if not payload.get("category"):
        payload["category"] = None

    created = await observations_table.create(supabase_client, payload)
    logger.info(f"Observation created: id={created.get('id')} author={author_id}")
    return await observations_table.get(supabase_client, created["id"]) or created


async def update_observation(
    supabase_client: Client,
    observation_id: str,
    changes: Dict[str, Any],
) -> Optional[Dict[str, Any]]:
    if not changes:
        return await observations_table.get(supabase_client, observation_id)

    updated = await observations_table.update(supabase_client, observation_id, changes)
    if updated is None:
        return None
    return await observations_table.get(supabase_client, observation_id) or updated


async def delete_observation(supabase_client: Client, observation_id: str) -> bool:
    return await observations_table.delete(supabase_client, observation_id)
