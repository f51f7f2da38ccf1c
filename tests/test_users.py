"""
Tests for the ADMIN-only /users endpoints.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from backend.services.user_service import DuplicateEmailError

ADMIN_ROW = {
    "id": "admin-user-id",
    "name": "Admin",
    "email": "admin@example.org",
    "role": "ADMIN",
}

MEMBER_ROW = {
    "id": "member-user-id",
    "name": "Maria",
    "email": "maria@example.org",
    "role": "MEMBER",
    "phone": "+55 11 99999-0000",
}


@pytest.fixture
def mock_get_supabase_client():
    with patch("backend.routes.users.get_supabase_client") as mock:
        mock.return_value = MagicMock()
        yield mock


class TestListUsers:
    @patch("backend.routes.users.list_users", new_callable=AsyncMock)
    def test_admin_lists_users(self, mock_list, client, as_admin, mock_get_supabase_client):
        mock_list.return_value = [ADMIN_ROW, MEMBER_ROW]

        response = client.get("/users")

        assert response.status_code == 200
        users = response.json()["users"]
        assert [u["id"] for u in users] == ["admin-user-id", "member-user-id"]
        assert all("password" not in u for u in users)

    def test_member_gets_403(self, client, as_member):
        response = client.get("/users")
        assert response.status_code == 403

    def test_no_token_gets_401(self, client):
        response = client.get("/users")
        assert response.status_code == 401


class TestCreateUser:
    @patch("backend.routes.users.create_user", new_callable=AsyncMock)
    def test_create_user(self, mock_create, client, as_admin, mock_get_supabase_client):
        mock_create.return_value = MEMBER_ROW

        response = client.post(
            "/users",
            json={"name": "Maria", "email": "maria@example.org", "phone": "+55 11 99999-0000"},
        )

        assert response.status_code == 201
        assert response.json()["message"] == "User created successfully"
        assert response.json()["user"]["phone"] == "+55 11 99999-0000"
        assert mock_create.call_args.kwargs["role"] == "MEMBER"

    def test_invalid_email_returns_400(self, client, as_admin):
        response = client.post("/users", json={"name": "Maria", "email": "not-an-email"})
        assert response.status_code == 400

    @patch("backend.routes.users.create_user", new_callable=AsyncMock)
    def test_duplicate_email_returns_400(self, mock_create, client, as_admin, mock_get_supabase_client):
        mock_create.side_effect = DuplicateEmailError("Email already in use")

        response = client.post("/users", json={"name": "Maria", "email": "maria@example.org"})

        assert response.status_code == 400
        assert response.json()["error"] == "email_in_use"


class TestUpdateUser:
    @patch("backend.routes.users.update_user", new_callable=AsyncMock)
    def test_update_sends_only_provided_fields(self, mock_update, client, as_admin, mock_get_supabase_client):
        mock_update.return_value = {**MEMBER_ROW, "role": "ADMIN"}

        response = client.put("/users/member-user-id", json={"role": "ADMIN"})

        assert response.status_code == 200
        assert response.json()["user"]["role"] == "ADMIN"
        changes = mock_update.call_args.args[2]
        assert changes == {"role": "ADMIN"}

    @patch("backend.routes.users.update_user", new_callable=AsyncMock)
    def test_update_missing_user_returns_404(self, mock_update, client, as_admin, mock_get_supabase_client):
        mock_update.return_value = None

        response = client.put("/users/ghost", json={"name": "Ghost"})

        assert response.status_code == 404


class TestDeleteUser:
    @patch("backend.routes.users.delete_user", new_callable=AsyncMock)
    @patch("backend.routes.users.get_user_by_id", new_callable=AsyncMock)
    def test_admin_cannot_delete_self(self, mock_get, mock_delete, client, as_admin, mock_get_supabase_client):
        mock_get.return_value = ADMIN_ROW

        response = client.delete("/users/admin-user-id")

        assert response.status_code == 400
        assert response.json()["error"] == "cannot_delete_self"
        mock_delete.assert_not_called()

    @patch("backend.routes.users.delete_user", new_callable=AsyncMock)
    @patch("backend.routes.users.get_user_by_id", new_callable=AsyncMock)
    def test_missing_user_returns_404_before_self_check(
        self, mock_get, mock_delete, client, as_admin, mock_get_supabase_client
    ):
        mock_get.return_value = None

        response = client.delete("/users/admin-user-id")

        assert response.status_code == 404
        mock_delete.assert_not_called()

    @patch("backend.routes.users.delete_user", new_callable=AsyncMock)
    @patch("backend.routes.users.get_user_by_id", new_callable=AsyncMock)
    def test_delete_other_user(self, mock_get, mock_delete, client, as_admin, mock_get_supabase_client):
        mock_get.return_value = MEMBER_ROW
        mock_delete.return_value = True

        response = client.delete("/users/member-user-id")

        assert response.status_code == 200
        mock_delete.assert_awaited_once()
