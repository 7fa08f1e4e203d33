"""Pydantic schemas for API responses."""

from typing import Optional

from pydantic import BaseModel, Field


class ShortenResponse(BaseModel):
    """Response after shortening a URL."""

    code: str = Field(..., description="The short code for the URL")

    model_config = {
        "json_schema_extra": {
            "examples": [{"code": "004oMw"}]
        }
    }


class ExpandResponse(BaseModel):
    """Response with the original URL of a short code."""

    url: str = Field(..., description="The original long URL")

    model_config = {
        "json_schema_extra": {
            "examples": [{"url": "https://example.com/very/long/path"}]
        }
    }


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")


class ReadinessResponse(BaseModel):
    """Readiness probe response."""

    status: str = Field(..., description="'ok' or 'db not ready'")


class LivenessResponse(BaseModel):
    """Liveness probe response, with Kubernetes downward API details when set."""

    status: str = "up"
    build: Optional[str] = None
    host: Optional[str] = None
    pod: Optional[str] = None
    pod_ip: Optional[str] = Field(None, alias="podIP")
    node: Optional[str] = None
    namespace: Optional[str] = None

    model_config = {"populate_by_name": True}
