"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class RewriteRequest(BaseModel):
    """Request to shorten every URL in a piece of text."""

    text: str = Field(..., description="Free text containing URLs")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"text": "See https://example.com/very/long/path and https://github.com/user/repo"}
            ]
        }
    }


class RewriteResponse(BaseModel):
    """Rewritten text."""

    value: str = Field(..., description="Text with every URL replaced by its short URL")


class MappingResponse(BaseModel):
    """A short code mapping."""

    short_code: str = Field(..., description="The short code")
    short_url: str = Field(..., description="The complete short URL")
    original_url: str = Field(..., description="The original long URL")
    status: str = Field(..., description="ACTIVE or DEACTIVATED")
    created_at: datetime = Field(..., description="Creation timestamp")
    deactivated_at: Optional[datetime] = Field(None, description="Deactivation timestamp")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "short_code": "abc123",
                    "short_url": "https://short.link/abc123",
                    "original_url": "https://example.com/very/long/path",
                    "status": "ACTIVE",
                    "created_at": "2024-01-01T12:00:00Z",
                    "deactivated_at": None,
                }
            ]
        }
    }


class DeactivateResponse(MappingResponse):
    """Confirmation of a deactivation."""

    result: str = Field("OK", description="Confirmation marker")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Database status")
    cache: str = Field(..., description="Cache status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    code: str = Field(..., description="Machine-readable error code")
    kind: str = Field(..., description="Error class")
    message: str = Field(..., description="Human readable message")
