"""
Tests for notifications: fan-out rules and the caller-scoped endpoints.
"""

from unittest.mock import AsyncMock, patch

import pytest

from backend.services.notification_service import (
    list_notifications,
    mark_notification_read,
    notify_users,
    select_recipients,
)

NOTIFICATION_ROW = {
    "id": "notif-1",
    "user_id": "member-user-id",
    "type": "SCALE_ASSIGNMENT",
    "entity_type": "SCALE",
    "entity_id": "scale-1",
    "title": "You have been assigned to a scale",
    "message": None,
    "read": False,
    "created_at": "2025-03-01T10:00:00Z",
    "read_at": None,
}


@pytest.fixture
def mock_get_supabase_client(supabase_client):
    with patch("backend.routes.notifications.get_supabase_client") as mock:
        mock.return_value = supabase_client
        yield mock


class TestFanOut:
    def test_select_recipients_drops_actor_blanks_and_duplicates(self):
        assert select_recipients(["u1", "actor", "u2", "u1", None, ""], "actor") == ["u1", "u2"]

    @pytest.mark.asyncio
    async def test_single_bulk_insert_one_row_per_recipient(self, supabase_client):
        sent = await notify_users(
            supabase_client,
            ["u1", "u2", "u1", "actor"],
            actor_id="actor",
            notification_type="SCALE_PUBLISHED",
            title="Scale published",
            message="Week 2025-03-02 to 2025-03-08",
            entity_type="SCALE",
            entity_id="scale-1",
        )

        assert sent == 2
        insert = supabase_client.table.return_value.insert
        insert.assert_called_once()
        rows = insert.call_args.args[0]
        assert [row["user_id"] for row in rows] == ["u1", "u2"]
        assert rows[0] == {
            "user_id": "u1",
            "type": "SCALE_PUBLISHED",
            "entity_type": "SCALE",
            "entity_id": "scale-1",
            "title": "Scale published",
            "message": "Week 2025-03-02 to 2025-03-08",
        }

    @pytest.mark.asyncio
    async def test_no_recipients_means_no_insert(self, supabase_client):
        sent = await notify_users(
            supabase_client, ["actor"], actor_id="actor",
            notification_type="GROUP_ITEM_PUBLISHED", title="New item in group",
        )

        assert sent == 0
        supabase_client.table.assert_not_called()

    @pytest.mark.asyncio
    async def test_insert_failure_is_swallowed(self, supabase_client):
        supabase_client.table.return_value.insert.return_value.execute.side_effect = Exception("db down")

        sent = await notify_users(
            supabase_client, ["u1"], actor_id="actor",
            notification_type="GROUP_ITEM_PUBLISHED", title="New item in group",
        )

        assert sent == 0


class TestNotificationService:
    @pytest.mark.asyncio
    async def test_list_returns_unread_count(self, supabase_client, pg_result):
        listing = supabase_client.table.return_value.select.return_value.eq.return_value
        listing.order.return_value.limit.return_value.execute.return_value = pg_result([NOTIFICATION_ROW])
        listing.eq.return_value.execute.return_value = pg_result([{"id": "notif-1"}], count=4)

        rows, unread = await list_notifications(supabase_client, "member-user-id", limit=5)

        assert unread == 4
        assert rows[0]["message"] == ""
        listing.order.return_value.limit.assert_called_once_with(5)

    @pytest.mark.asyncio
    async def test_mark_read_is_scoped_to_owner(self, supabase_client, pg_result):
        update = supabase_client.table.return_value.update
        update.return_value.eq.return_value.eq.return_value.execute.return_value = pg_result([])

        assert await mark_notification_read(supabase_client, "member-user-id", "someone-elses") is False
        update.return_value.eq.return_value.eq.assert_called_once_with("user_id", "member-user-id")


class TestNotificationEndpoints:
    @patch("backend.routes.notifications.list_notifications", new_callable=AsyncMock)
    def test_list(self, mock_list, client, as_member, mock_get_supabase_client):
        mock_list.return_value = ([{**NOTIFICATION_ROW, "message": ""}], 1)

        response = client.get("/notifications")

        assert response.status_code == 200
        data = response.json()
        assert data["unreadCount"] == 1
        assert data["notifications"][0]["entityId"] == "scale-1"
        assert mock_list.call_args.args[1:] == ("member-user-id", 20)

    @patch("backend.routes.notifications.mark_notification_read", new_callable=AsyncMock)
    def test_mark_foreign_notification_returns_404(self, mock_mark, client, as_member, mock_get_supabase_client):
        mock_mark.return_value = False

        response = client.post("/notifications/notif-9/read")

        assert response.status_code == 404

    @patch("backend.routes.notifications.mark_all_notifications_read", new_callable=AsyncMock)
    def test_read_all(self, mock_mark_all, client, as_member, mock_get_supabase_client):
        mock_mark_all.return_value = 3

        response = client.post("/notifications/read-all")

        assert response.status_code == 200
        mock_mark_all.assert_awaited_once()

    def test_requires_token(self, client):
        response = client.get("/notifications")
        assert response.status_code == 401
