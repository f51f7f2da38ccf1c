"""
Rehearsal persistence service.
"""

import logging
from typing import Any, Dict, List, Optional

from supabase import Client

from backend.services.resource_service import TableService
from backend.utils.constants import AUTHOR_EMBED

logger = logging.getLogger(__name__)

rehearsals_table = TableService(
    "rehearsals",
    select=f"id,title,date,location,notes,created_by,created_at,updated_at,{AUTHOR_EMBED}",
    order=(("date", True),),
)


async def list_rehearsals(supabase_client: Client) -> List[Dict[str, Any]]:
    return await rehearsals_table.list(supabase_client)


async def get_rehearsal_by_id(supabase_client: Client, rehearsal_id: str) -> Optional[Dict[str, Any]]:
    return await rehearsals_table.get(supabase_client, rehearsal_id)


async def create_rehearsal(
    supabase_client: Client,
    created_by: str,
    data: Dict[str, Any],
) -> Dict[str, Any]:
    payload = {
        "title": data["title"],
        "date": data["date"],
        "location": data.get("location") or None,
        "notes": data.get("notes") or None,
        "created_by": created_by,
    }
    created = await rehearsals_table.create(supabase_client, payload)
    logger.info(f"Rehearsal scheduled: id={created.get('id')} date={payload['date']}")
    return await rehearsals_table.get(supabase_client, created["id"]) or created


async def update_rehearsal(
    supabase_client: Client,
    rehearsal_id: str,
    changes: Dict[str, Any],
) -> Optional[Dict[str, Any]]:
    """
    Partially update a rehearsal.

    Returns:
        The updated rehearsal, or None if it does not exist
    """
    if not changes:
        return await rehearsals_table.get(supabase_client, rehearsal_id)

    updated = await rehearsals_table.update(supabase_client, rehearsal_id, changes)
    if updated is None:
        return None
    return await rehearsals_table.get(supabase_client, rehearsal_id) or updated


async def delete_rehearsal(supabase_client: Client, rehearsal_id: str) -> bool:
    return await rehearsals_table.delete(supabase_client, rehearsal_id)
