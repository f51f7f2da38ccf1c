"""
Tests for groups, group items and the item-published notification.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from backend.services.group_service import create_group_item, update_group

GROUP = {
    "id": "grp-1",
    "name": "Louvor",
    "description": "Equipe de louvor",
    "created_by": "admin-user-id",
    "members": [
        {"id": "admin-user-id", "name": "Admin", "email": "admin@example.org", "photo_url": None},
        {"id": "u1", "name": "Ana", "email": "ana@example.org", "photo_url": None},
        {"id": "u2", "name": "Bruno", "email": "bruno@example.org", "photo_url": "https://cdn/b.png"},
    ],
    "created_at": "2025-01-10T10:00:00Z",
    "updated_at": "2025-01-10T10:00:00Z",
}

ITEM_ROW = {
    "id": "item-1",
    "group_id": "grp-1",
    "title": "Cifra - Grande é o Senhor",
    "description": None,
    "type": "LINK",
    "url": "https://example.org/cifra",
    "storage_path": None,
    "author_id": "admin-user-id",
    "created_at": "2025-03-01T10:00:00Z",
    "updated_at": "2025-03-01T10:00:00Z",
}


@pytest.fixture
def mock_get_supabase_client():
    with patch("backend.routes.groups.get_supabase_client") as mock:
        mock.return_value = MagicMock()
        yield mock


class TestGroupEndpoints:
    @patch("backend.routes.groups.list_groups", new_callable=AsyncMock)
    def test_list_groups_with_members(self, mock_list, client, as_member, mock_get_supabase_client):
        mock_list.return_value = [GROUP]

        response = client.get("/groups")

        assert response.status_code == 200
        members = response.json()["groups"][0]["members"]
        assert members[2]["photoUrl"] == "https://cdn/b.png"

    @patch("backend.routes.groups.create_group", new_callable=AsyncMock)
    def test_create_group_dedupes_member_ids(self, mock_create, client, as_admin, mock_get_supabase_client):
        mock_create.return_value = GROUP

        response = client.post("/groups", json={"name": "Louvor", "memberIds": ["u1", "u2", "u1"]})

        assert response.status_code == 201
        assert mock_create.call_args.kwargs["member_ids"] == ["u1", "u2"]
        assert mock_create.call_args.kwargs["created_by"] == "admin-user-id"

    @patch("backend.routes.groups.update_group", new_callable=AsyncMock)
    def test_update_missing_group_returns_404(self, mock_update, client, as_admin, mock_get_supabase_client):
        mock_update.return_value = None

        response = client.put("/groups/ghost", json={"memberIds": []})

        assert response.status_code == 404
        assert mock_update.call_args.args[2] == {"member_ids": []}

    def test_member_cannot_create_group(self, client, as_member):
        response = client.post("/groups", json={"name": "Louvor"})
        assert response.status_code == 403


class TestGroupItemEndpoints:
    @patch("backend.routes.groups.create_group_item", new_callable=AsyncMock)
    @patch("backend.routes.groups.get_group_by_id", new_callable=AsyncMock)
    def test_publish_item(self, mock_get, mock_create, client, as_admin, mock_get_supabase_client):
        mock_get.return_value = GROUP
        mock_create.return_value = ITEM_ROW

        response = client.post(
            "/groups/grp-1/items",
            json={"title": "Cifra - Grande é o Senhor", "type": "LINK", "url": "https://example.org/cifra"},
        )

        assert response.status_code == 201
        assert response.json()["item"]["groupId"] == "grp-1"
        assert mock_create.call_args.args[2] == "admin-user-id"

    @patch("backend.routes.groups.get_group_by_id", new_callable=AsyncMock)
    def test_publish_item_to_missing_group_returns_404(self, mock_get, client, as_admin, mock_get_supabase_client):
        mock_get.return_value = None

        response = client.post("/groups/ghost/items", json={"title": "x", "type": "FILE"})

        assert response.status_code == 404

    def test_invalid_item_type_returns_400(self, client, as_admin):
        response = client.post("/groups/grp-1/items", json={"title": "x", "type": "VIDEO"})
        assert response.status_code == 400

    @patch("backend.routes.groups.delete_group_item", new_callable=AsyncMock)
    def test_delete_item_is_idempotent(self, mock_delete, client, as_admin, mock_get_supabase_client):
        mock_delete.return_value = None

        response = client.delete("/groups/grp-1/items/already-gone")

        assert response.status_code == 200
        assert response.json() == {"success": True}


class TestGroupService:
    @pytest.mark.asyncio
    async def test_item_notifies_members_except_author(self, supabase_client, pg_result):
        supabase_client.table.return_value.insert.return_value.execute.return_value = pg_result([ITEM_ROW])

        with patch("backend.services.group_service.notify_users", new_callable=AsyncMock) as mock_notify:
            await create_group_item(
                supabase_client,
                GROUP,
                "admin-user-id",
                {"title": "Cifra", "type": "FILE", "storage_path": "groups/grp-1/cifra.pdf"},
            )

        mock_notify.assert_awaited_once()
        args, kwargs = mock_notify.call_args
        assert args[1] == ["admin-user-id", "u1", "u2"]
        assert kwargs["actor_id"] == "admin-user-id"
        assert kwargs["notification_type"] == "GROUP_ITEM_PUBLISHED"
        assert kwargs["entity_type"] == "GROUP"
        assert kwargs["title"] == "New item in Louvor"
        assert kwargs["message"] == "File: Cifra"

    @pytest.mark.asyncio
    async def test_update_replaces_membership(self, supabase_client, pg_result):
        with patch("backend.services.group_service.groups_table") as mock_table, \
                patch("backend.services.group_service.replace_members", new_callable=AsyncMock) as mock_replace, \
                patch("backend.services.group_service.get_group_by_id", new_callable=AsyncMock) as mock_get:
            mock_table.exists = AsyncMock(return_value=True)
            mock_get.return_value = GROUP

            group = await update_group(supabase_client, "grp-1", {"member_ids": ["u1"]})

        assert group == GROUP
        mock_replace.assert_awaited_once_with(supabase_client, "grp-1", ["u1"])

    @pytest.mark.asyncio
    async def test_update_missing_group_returns_none(self, supabase_client):
        with patch("backend.services.group_service.groups_table") as mock_table, \
                patch("backend.services.group_service.replace_members", new_callable=AsyncMock) as mock_replace:
            mock_table.update = AsyncMock(return_value=None)

            assert await update_group(supabase_client, "ghost", {"name": "x", "member_ids": []}) is None

        mock_replace.assert_not_called()
