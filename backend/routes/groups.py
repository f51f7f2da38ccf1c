"""
Group and group item API endpoints.

Any authenticated user can browse groups and their items; managing groups
and publishing or removing items requires ADMIN.
"""

import logging

from fastapi import APIRouter, status

from backend.auth.dependencies import AdminUser, CurrentUser
from backend.db.client import get_supabase_client
from backend.routes.errors import bad_request, not_found, server_error
from backend.schemas.common import MessageResponse, SuccessResponse
from backend.schemas.groups import (
    GroupCreateRequest,
    GroupDetailResponse,
    GroupItemCreateRequest,
    GroupItemDetailResponse,
    GroupItemListResponse,
    GroupItemResponse,
    GroupListResponse,
    GroupMutationResponse,
    GroupResponse,
    GroupUpdateRequest,
)
from backend.services.group_service import (
    create_group,
    create_group_item,
    delete_group,
    delete_group_item,
    get_group_by_id,
    list_group_items,
    list_groups,
    update_group,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/groups", tags=["groups"])


@router.get("", response_model=GroupListResponse, summary="List groups")
async def list_all_groups(auth_user: CurrentUser) -> GroupListResponse:
    """Groups ordered by name, each with its members."""
    supabase_client = get_supabase_client()

    try:
        groups = await list_groups(supabase_client)
    except Exception as e:
        logger.error(f"Failed to list groups: {e}", exc_info=True)
        raise server_error("fetch_error", "Failed to list groups")

    return GroupListResponse(groups=[GroupResponse.model_validate(g) for g in groups])


@router.get("/{group_id}", response_model=GroupDetailResponse, summary="Get a group")
async def get_group(group_id: str, auth_user: CurrentUser) -> GroupDetailResponse:
    supabase_client = get_supabase_client()

    try:
        group = await get_group_by_id(supabase_client, group_id)
    except Exception as e:
        logger.error(f"Failed to fetch group {group_id}: {e}", exc_info=True)
        raise server_error("fetch_error", "Failed to fetch group")

    if group is None:
        raise not_found("Group", group_id)

    return GroupDetailResponse(group=GroupResponse.model_validate(group))


@router.post(
    "",
    response_model=GroupMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a group",
)
async def create_group_record(request: GroupCreateRequest, auth_user: AdminUser) -> GroupMutationResponse:
    supabase_client = get_supabase_client()

    try:
        group = await create_group(
            supabase_client,
            created_by=auth_user.user_id,
            name=request.name,
            description=request.description,
            member_ids=request.member_ids,
        )
    except Exception as e:
        logger.error(f"Failed to create group: {e}", exc_info=True)
        raise server_error("persistence_error", "Failed to create group")

    return GroupMutationResponse(
        message="Group created successfully",
        group=GroupResponse.model_validate(group),
    )


@router.put("/{group_id}", response_model=GroupMutationResponse, summary="Update a group")
async def update_group_record(
    group_id: str,
    request: GroupUpdateRequest,
    auth_user: AdminUser,
) -> GroupMutationResponse:
    """
    Partially update a group.

    Sending memberIds replaces the membership entirely (an empty list
    removes every member).
    """
    supabase_client = get_supabase_client()

    try:
        group = await update_group(supabase_client, group_id, request.to_row(exclude_unset=True))
    except Exception as e:
        logger.error(f"Failed to update group {group_id}: {e}", exc_info=True)
        raise server_error("update_error", "Failed to update group")

    if group is None:
        raise not_found("Group", group_id)

    return GroupMutationResponse(
        message="Group updated successfully",
        group=GroupResponse.model_validate(group),
    )


@router.delete("/{group_id}", response_model=MessageResponse, summary="Delete a group")
async def delete_group_record(group_id: str, auth_user: AdminUser) -> MessageResponse:
    supabase_client = get_supabase_client()

    try:
        deleted = await delete_group(supabase_client, group_id)
    except Exception as e:
        logger.error(f"Failed to delete group {group_id}: {e}", exc_info=True)
        raise server_error("delete_error", "Failed to delete group")

    if not deleted:
        raise not_found("Group", group_id)

    return MessageResponse(message="Group deleted successfully")


# --- Group items ---

@router.get("/{group_id}/items", response_model=GroupItemListResponse, summary="List group items")
async def get_group_items(group_id: str, auth_user: CurrentUser) -> GroupItemListResponse:
    supabase_client = get_supabase_client()

    try:
        items = await list_group_items(supabase_client, group_id)
    except Exception as e:
        logger.error(f"Failed to list items of group {group_id}: {e}", exc_info=True)
        raise server_error("fetch_error", "Failed to list group items")

    return GroupItemListResponse(items=[GroupItemResponse.model_validate(i) for i in items])


@router.post(
    "/{group_id}/items",
    response_model=GroupItemDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Publish an item to a group",
    description="""
    Share a LINK or FILE with the group.

    Every member of the group except the author receives a
    GROUP_ITEM_PUBLISHED notification. A notification failure does not
    fail the request.
    """
)
async def create_group_item_record(
    group_id: str,
    request: GroupItemCreateRequest,
    auth_user: AdminUser,
) -> GroupItemDetailResponse:
    supabase_client = get_supabase_client()

    try:
        group = await get_group_by_id(supabase_client, group_id)
    except Exception as e:
        logger.error(f"Failed to fetch group {group_id}: {e}", exc_info=True)
        raise server_error("fetch_error", "Failed to fetch group")

    if group is None:
        raise not_found("Group", group_id)

    try:
        item = await create_group_item(supabase_client, group, auth_user.user_id, request.to_row())
    except ValueError as e:
        raise bad_request(str(e))
    except Exception as e:
        logger.error(f"Failed to create item in group {group_id}: {e}", exc_info=True)
        raise server_error("persistence_error", "Failed to create group item")

    return GroupItemDetailResponse(item=GroupItemResponse.model_validate(item))


@router.delete(
    "/{group_id}/items/{item_id}",
    response_model=SuccessResponse,
    summary="Remove an item from a group",
)
async def delete_group_item_record(group_id: str, item_id: str, auth_user: AdminUser) -> SuccessResponse:
    """Idempotent: removing an item that does not exist still succeeds."""
    supabase_client = get_supabase_client()

    try:
        await delete_group_item(supabase_client, group_id, item_id)
    except Exception as e:
        logger.error(f"Failed to delete item {item_id}: {e}", exc_info=True)
        raise server_error("delete_error", "Failed to delete group item")

    return SuccessResponse()
