"""
Tests for app-wide behaviour: health check and error body shapes.
"""

from unittest.mock import AsyncMock, patch


def test_health_is_public(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "ministry-backend"}


def test_unknown_route_uses_error_body(client):
    response = client.get("/does-not-exist")

    assert response.status_code == 404
    assert "error" in response.json()


def test_missing_token_is_401_with_error_body(client):
    response = client.get("/events")

    assert response.status_code == 401
    assert response.json()["error"] == "unauthorized"


def test_validation_errors_are_400(client, as_admin):
    with patch("backend.routes.events.create_event", new_callable=AsyncMock) as mock_create:
        response = client.post("/events", json={"description": "no title"})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation error"
    assert isinstance(body["details"], list)
    mock_create.assert_not_called()
