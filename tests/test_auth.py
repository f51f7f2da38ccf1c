"""
Tests for the auth guard and /auth endpoints.

Covers:
- 401 for missing, malformed, forged and expired tokens
- 403 for members on admin-only endpoints
- register/login/me/change-password flows
"""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import jwt
import pytest

from backend.auth.security import create_access_token, hash_password, verify_password
from backend.services.auth_service import InvalidCredentialsError, PasswordChangeError
from backend.services.user_service import DuplicateEmailError

USER_ROW = {
    "id": "member-user-id",
    "name": "Maria",
    "email": "maria@example.org",
    "role": "MEMBER",
    "photo_url": None,
    "phone": None,
    "birth_date": None,
    "ministry_entry_date": "2025-01-01T00:00:00Z",
    "created_at": "2025-01-01T00:00:00Z",
    "updated_at": "2025-01-01T00:00:00Z",
}


@pytest.fixture
def mock_get_supabase_client():
    with patch("backend.routes.auth.get_supabase_client") as mock:
        mock.return_value = MagicMock()
        yield mock


class TestAuthGuard:
    """The bearer-token guard shared by every protected endpoint."""

    def test_missing_token_returns_401(self, client):
        response = client.get("/events")
        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"

    def test_malformed_header_returns_401(self, client):
        response = client.get("/events", headers={"Authorization": "Token abc"})
        assert response.status_code == 401

    def test_forged_token_returns_401(self, client):
        forged = jwt.encode(
            {"userId": "x", "email": "x@example.org", "role": "ADMIN", "exp": 9999999999},
            "some-other-secret",
            algorithm="HS256",
        )
        response = client.get("/events", headers={"Authorization": f"Bearer {forged}"})
        assert response.status_code == 401
        assert response.json()["error"] == "invalid_token"

    def test_expired_token_returns_401(self, client):
        token = create_access_token("u1", "u1@example.org", "MEMBER", expires_in=timedelta(seconds=-10))
        response = client.get("/events", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["error"] == "token_expired"

    def test_member_token_on_admin_endpoint_returns_403(self, client, member_headers):
        response = client.get("/users", headers=member_headers)
        assert response.status_code == 403
        assert response.json() == {"error": "forbidden", "details": "Admin access required"}

    def test_member_cannot_create_event(self, client, member_headers):
        response = client.post(
            "/events",
            headers=member_headers,
            json={
                "title": "Culto",
                "startTime": "2025-03-01T19:00:00Z",
                "endTime": "2025-03-01T21:00:00Z",
            },
        )
        assert response.status_code == 403

    def test_valid_member_token_passes(self, client, member_headers):
        with patch("backend.routes.events.get_supabase_client"), \
                patch("backend.routes.events.list_events", new_callable=AsyncMock) as mock_list:
            mock_list.return_value = []
            response = client.get("/events", headers=member_headers)

        assert response.status_code == 200
        assert response.json() == {"events": []}


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("secret1")
        assert hashed != "secret1"
        assert verify_password("secret1", hashed)
        assert not verify_password("wrong", hashed)

    def test_verify_handles_missing_hash(self):
        assert not verify_password("secret1", None)

    def test_password_over_72_bytes_is_rejected(self):
        with pytest.raises(ValueError):
            hash_password("x" * 73)


class TestRegister:
    @patch("backend.routes.auth.register_user", new_callable=AsyncMock)
    def test_register_returns_token_and_member(self, mock_register, client, mock_get_supabase_client):
        mock_register.return_value = ("signed-token", USER_ROW)

        response = client.post(
            "/auth/register",
            json={"name": "Maria", "email": "maria@example.org", "password": "secret1", "role": "ADMIN"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["token"] == "signed-token"
        assert data["user"]["role"] == "MEMBER"
        assert "password" not in data["user"]
        assert mock_register.call_args.kwargs["email"] == "maria@example.org"

    def test_short_password_returns_400(self, client):
        response = client.post(
            "/auth/register",
            json={"name": "Maria", "email": "maria@example.org", "password": "123"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Validation error"

    @patch("backend.routes.auth.register_user", new_callable=AsyncMock)
    def test_duplicate_email_returns_400(self, mock_register, client, mock_get_supabase_client):
        mock_register.side_effect = DuplicateEmailError("Email already in use")

        response = client.post(
            "/auth/register",
            json={"name": "Maria", "email": "maria@example.org", "password": "secret1"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "email_in_use"


class TestLogin:
    @patch("backend.routes.auth.login_user", new_callable=AsyncMock)
    def test_login_success(self, mock_login, client, mock_get_supabase_client):
        mock_login.return_value = ("signed-token", USER_ROW)

        response = client.post("/auth/login", json={"email": "maria@example.org", "password": "secret1"})

        assert response.status_code == 200
        assert response.json()["token"] == "signed-token"
        assert response.json()["user"]["email"] == "maria@example.org"

    @patch("backend.routes.auth.login_user", new_callable=AsyncMock)
    def test_wrong_credentials_return_401(self, mock_login, client, mock_get_supabase_client):
        mock_login.side_effect = InvalidCredentialsError()

        response = client.post("/auth/login", json={"email": "maria@example.org", "password": "nope"})

        assert response.status_code == 401
        assert response.json()["details"] == "Invalid email or password"


class TestMe:
    @patch("backend.routes.auth.get_user_by_id", new_callable=AsyncMock)
    def test_me_returns_profile(self, mock_get, client, as_member, mock_get_supabase_client):
        mock_get.return_value = USER_ROW

        response = client.get("/auth/me")

        assert response.status_code == 200
        assert response.json()["user"]["id"] == "member-user-id"
        assert response.json()["user"]["ministryEntryDate"] == "2025-01-01T00:00:00Z"

    @patch("backend.routes.auth.get_user_by_id", new_callable=AsyncMock)
    def test_me_for_deleted_user_returns_404(self, mock_get, client, as_member, mock_get_supabase_client):
        mock_get.return_value = None

        response = client.get("/auth/me")

        assert response.status_code == 404


class TestChangePassword:
    @patch("backend.routes.auth.change_password", new_callable=AsyncMock)
    def test_change_password_success(self, mock_change, client, as_member, mock_get_supabase_client):
        mock_change.return_value = True

        response = client.post(
            "/auth/change-password",
            json={"currentPassword": "secret1", "newPassword": "secret2"},
        )

        assert response.status_code == 200
        assert mock_change.call_args.kwargs["user_id"] == "member-user-id"

    @patch("backend.routes.auth.change_password", new_callable=AsyncMock)
    def test_wrong_current_password_returns_400(self, mock_change, client, as_member, mock_get_supabase_client):
        mock_change.side_effect = PasswordChangeError("Current password is incorrect")

        response = client.post(
            "/auth/change-password",
            json={"currentPassword": "bad", "newPassword": "secret2"},
        )

        assert response.status_code == 400
        assert response.json()["details"] == "Current password is incorrect"
