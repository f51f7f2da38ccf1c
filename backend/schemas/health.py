"""
Health check schema.
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """
    Response model for GET /health (public, no authentication).
    """

    status: str = Field(default="ok", examples=["ok"])
    service: str = Field(default="ministry-backend", description="Service identifier")
