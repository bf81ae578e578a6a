"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.
Separated from endpoints to keep concerns separated and enable reuse.

ShortenRequest keeps url optional and untyped on purpose: a missing or
malformed url must come back as a 400 from the link service, not as
FastAPI's 422 validation error.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ShortenRequest(BaseModel):
    """Request model for URL shortening endpoint (JSON or form body)."""
    url: Optional[str] = Field(default=None, description="The long URL to shorten")
    password: Optional[str] = Field(
        default=None,
        description="Optional password required to follow the link"
    )


class ShortenResponse(BaseModel):
    """Response model for URL shortening endpoint."""
    short: str = Field(..., description="The complete short URL")
    code: str = Field(..., description="The generated short code")


class HealthResponse(BaseModel):
    ok: bool


class ReadinessResponse(BaseModel):
    ok: bool
    database: bool


class ErrorResponse(BaseModel):
    """Body of every JSON error response."""
    error: str
