"""
HTTPException builders shared by the routers.

All error bodies follow {"error": <code or message>, "details": <context>}.
backend.main flattens HTTPException.detail into the response body.
"""

from typing import Any

from fastapi import HTTPException, status


def bad_request(details: Any, error: str = "invalid_request") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error": error, "details": details}
    )


def not_found(resource: str, resource_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"error": "not_found", "details": f"{resource} {resource_id} not found"}
    )


def server_error(error: str, details: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": error, "details": details}
    )
