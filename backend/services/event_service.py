"""
Event persistence service.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter
from supabase import Client

from backend.schemas.common import ensure_aware
from backend.services.resource_service import TableService
from backend.utils.constants import AUTHOR_EMBED

logger = logging.getLogger(__name__)

events_table = TableService(
    "events",
    select=f"id,title,description,location,start_time,end_time,author_id,created_at,updated_at,{AUTHOR_EMBED}",
    order=(("start_time", False),),
)

_datetime_adapter = TypeAdapter(datetime)


def _as_datetime(value: Any) -> datetime:
    return ensure_aware(_datetime_adapter.validate_python(value))


def check_time_window(
    existing: Dict[str, Any],
    start_time: Optional[datetime],
    end_time: Optional[datetime],
) -> None:
    """
    Validate the effective start/end after merging an update over a stored event.

    Raises:
        ValueError: If the resulting end time is not after the start time
    """
    if start_time is None and end_time is None:
        return

    effective_start = ensure_aware(start_time) if start_time else _as_datetime(existing["start_time"])
    effective_end = ensure_aware(end_time) if end_time else _as_datetime(existing["end_time"])

    if effective_end <= effective_start:
        raise ValueError("End time must be after start time")


async def list_events(supabase_client: Client) -> List[Dict[str, Any]]:
    return await events_table.list(supabase_client)


async def get_event_by_id(supabase_client: Client, event_id: str) -> Optional[Dict[str, Any]]:
    return await events_table.get(supabase_client, event_id)


async def create_event(
    supabase_client: Client,
    author_id: str,
    title: str,
    start_time: datetime,
    end_time: datetime,
    description: Optional[str] = None,
    location: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Insert an event and return it with the author embedded.

    Raises:
        ValueError: If end_time <= start_time
    """
    if ensure_aware(end_time) <= ensure_aware(start_time):
        raise ValueError("End time must be after start time")

    created = await events_table.create(
        supabase_client,
        {
            "title": title,
            "description": description,
            "location": location,
            "start_time": start_time.isoformat(),
            "end_time": end_time.isoformat(),
            "author_id": author_id,
        },
    )

    # Re-read so the response carries the embedded author
    return await events_table.get(supabase_client, created["id"]) or created


async def update_event(
    supabase_client: Client,
    event_id: str,
    changes: Dict[str, Any],
) -> Optional[Dict[str, Any]]:
    """
    Partially update an event.

    Returns:
        The updated event, or None if it does not exist

    Raises:
        ValueError: If the merged time window is invalid
    """
    existing = await events_table.get(supabase_client, event_id)
    if existing is None:
        return None

    check_time_window(existing, changes.get("start_time"), changes.get("end_time"))

    data = {
        key: (value.isoformat() if isinstance(value, datetime) else value)
        for key, value in changes.items()
    }
    if not data:
        return existing

    updated = await events_table.update(supabase_client, event_id, data)
    if updated is None:
        return None
    return await events_table.get(supabase_client, event_id) or updated


async def delete_event(supabase_client: Client, event_id: str) -> bool:
    return await events_table.delete(supabase_client, event_id)
