"""
Pytest configuration for the backend tests.

Sets up the test environment and shared fixtures.
"""
import os
import pytest
from unittest.mock import MagicMock

# Disable config validation during tests
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables (before any backend import)
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-with-enough-length-for-hs256")

from fastapi.testclient import TestClient

from backend.auth.dependencies import AuthenticatedUser, get_authenticated_user
from backend.auth.security import create_access_token
from backend.main import app

ADMIN_ID = "admin-user-id"
MEMBER_ID = "member-user-id"


@pytest.fixture
def client():
    """Test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def supabase_client():
    """
    Mock Supabase client.

    PostgREST builder methods return new MagicMocks, so tests set
    .execute.return_value on the chain they exercise.
    """
    return MagicMock()


def _override_identity(user: AuthenticatedUser):
    async def dependency():
        return user
    app.dependency_overrides[get_authenticated_user] = dependency


@pytest.fixture
def as_admin():
    """Run requests as an ADMIN user."""
    user = AuthenticatedUser(
        user_id=ADMIN_ID,
        email="admin@example.org",
        role="ADMIN",
        access_token="test-admin-token",
    )
    _override_identity(user)
    yield user
    app.dependency_overrides.clear()


@pytest.fixture
def as_member():
    """Run requests as a MEMBER user."""
    user = AuthenticatedUser(
        user_id=MEMBER_ID,
        email="member@example.org",
        role="MEMBER",
        access_token="test-member-token",
    )
    _override_identity(user)
    yield user
    app.dependency_overrides.clear()


@pytest.fixture
def member_headers():
    """Authorization header carrying a real MEMBER token."""
    token = create_access_token(MEMBER_ID, "member@example.org", "MEMBER")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    """Authorization header carrying a real ADMIN token."""
    token = create_access_token(ADMIN_ID, "admin@example.org", "ADMIN")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def pg_result():
    """Factory for fake PostgREST responses (.data and .count)."""
    def build(data=None, count=None):
        response = MagicMock()
        response.data = data if data is not None else []
        response.count = count
        return response
    return build
