"""
Ristorante API: Shared Response Schemas
========================================
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Error body for every non-2xx JSON response.

    Example:
        {"error": "name and price_cents required"}
    """
    error: str = Field(description="Human-readable error message")


class OkResponse(BaseModel):
    ok: bool = Field(default=True)


class HealthResponse(BaseModel):
    """Liveness plus database reachability."""
    ok: bool = Field(description="Always true when the process answers")
    db: bool = Field(description="Whether SELECT 1 succeeded")


class UploadResponse(BaseModel):
    """Returned by the gallery upload with HTTP 201."""
    key: str = Field(description="Object-store key of the stored image")
    url: str = Field(description="Public URL serving the image through /img/")
