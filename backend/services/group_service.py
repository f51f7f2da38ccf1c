"""
Group and group item persistence service.

Membership lives in group_members (group_id, user_id, added_at). Replacing
a membership deletes every row of the group and inserts the new set.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from supabase import Client

from backend.schemas.common import utc_now_iso
from backend.services.notification_service import notify_users
from backend.services.resource_service import TableService
from backend.utils.constants import (
    AUTHOR_EMBED,
    GROUP_ITEM_TYPES,
    NOTIFICATION_ENTITY_TYPES,
    NOTIFICATION_TYPES,
)

logger = logging.getLogger(__name__)

groups_table = TableService(
    "groups",
    select=(
        "id,name,description,created_by,created_at,updated_at,"
        "memberships:group_members(user:users(id,name,email,photo_url))"
    ),
    order=(("name", False),),
)

group_items_table = TableService(
    "group_items",
    select=(
        "id,group_id,title,description,type,url,storage_path,author_id,"
        f"created_at,updated_at,{AUTHOR_EMBED}"
    ),
    order=(("created_at", True),),
)


def _with_members(row: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten the embedded memberships into a members list."""
    group = dict(row)
    memberships = group.pop("memberships", None) or []
    group["members"] = [m["user"] for m in memberships if m.get("user")]
    group["description"] = group.get("description") or ""
    return group


async def get_member_ids(supabase_client: Client, group_id: str) -> List[str]:
    result = (
        supabase_client.table("group_members")
        .select("user_id")
        .eq("group_id", group_id)
        .execute()
    )
    return [row["user_id"] for row in result.data or []]


async def replace_members(supabase_client: Client, group_id: str, member_ids: Sequence[str]) -> None:
    """Delete the group's memberships and insert member_ids as the new set."""
    supabase_client.table("group_members").delete().eq("group_id", group_id).execute()

    if member_ids:
        now = utc_now_iso()
        supabase_client.table("group_members").insert(
            [{"group_id": group_id, "user_id": uid, "added_at": now} for uid in member_ids]
        ).execute()

    logger.info(f"Group {group_id} membership replaced ({len(member_ids)} members)")


async def list_groups(supabase_client: Client) -> List[Dict[str, Any]]:
    rows = await groups_table.list(supabase_client)
    return [_with_members(row) for row in rows]


async def get_group_by_id(supabase_client: Client, group_id: str) -> Optional[Dict[str, Any]]:
    row = await groups_table.get(supabase_client, group_id)
    return _with_members(row) if row else None


async def create_group(
    supabase_client: Client,
    created_by: str,
    name: str,
    description: Optional[str] = "",
    member_ids: Sequence[str] = (),
) -> Dict[str, Any]:
    created = await groups_table.create(
        supabase_client,
        {"name": name, "description": description or "", "created_by": created_by},
    )

    if member_ids:
        await replace_members(supabase_client, created["id"], member_ids)

    return await get_group_by_id(supabase_client, created["id"]) or _with_members(created)


async def update_group(
    supabase_client: Client,
    group_id: str,
    changes: Dict[str, Any],
) -> Optional[Dict[str, Any]]:
    """
    Update group fields and, when member_ids is present, replace the membership.

    Returns:
        The updated group, or None if it does not exist
    """
    fields = dict(changes)
    member_ids = fields.pop("member_ids", None)

    if fields:
        updated = await groups_table.update(supabase_client, group_id, fields)
        if updated is None:
            return None
    elif not await groups_table.exists(supabase_client, group_id):
        return None

    if member_ids is not None:
        await replace_members(supabase_client, group_id, member_ids)

    return await get_group_by_id(supabase_client, group_id)


async def delete_group(supabase_client: Client, group_id: str) -> bool:
    return await groups_table.delete(supabase_client, group_id)


# --- Group items ---

async def list_group_items(supabase_client: Client, group_id: str) -> List[Dict[str, Any]]:
    """Items shared with a group, newest first."""
    return await group_items_table.list(
        supabase_client,
        apply_filters=lambda query: query.eq("group_id", group_id),
    )


async def create_group_item(
    supabase_client: Client,
    group: Dict[str, Any],
    author_id: str,
    data: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Publish an item to a group and notify its members (except the author).

    Args:
        group: The target group as returned by get_group_by_id
        author_id: Publishing user
        data: {title, description, type, url, storage_path}

    Raises:
        ValueError: If type is not LINK/FILE
    """
    item_type = data.get("type")
    if item_type not in GROUP_ITEM_TYPES:
        raise ValueError("Type must be LINK or FILE")

    created = await group_items_table.create(
        supabase_client,
        {
            "group_id": group["id"],
            "title": data["title"],
            "description": data.get("description") or None,
            "type": item_type,
            "url": data.get("url") or None,
            "storage_path": data.get("storage_path") or None,
            "author_id": author_id,
        },
    )
    item = await group_items_table.get(supabase_client, created["id"]) or created

    group_name = group.get("name") or ""
    await notify_users(
        supabase_client,
        [member["id"] for member in group.get("members", [])],
        actor_id=author_id,
        notification_type=NOTIFICATION_TYPES['GROUP_ITEM_PUBLISHED'],
        title=f"New item in {group_name}" if group_name else "New item in group",
        message=f"{'File' if item_type == 'FILE' else 'Link'}: {data['title']}",
        entity_type=NOTIFICATION_ENTITY_TYPES['GROUP'],
        entity_id=group["id"],
    )

    return item


async def delete_group_item(supabase_client: Client, group_id: str, item_id: str) -> None:
    """Remove an item from a group; absent items are ignored."""
    result = (
        supabase_client.table("group_items")
        .delete()
        .eq("id", item_id)
        .eq("group_id", group_id)
        .execute()
    )
    deleted = bool(result.data)
    logger.info(f"group_items: delete id={item_id} group={group_id} deleted={deleted}")
