"""
API schemas for assetstamp.

Pydantic models for request/response validation.
"""

from pydantic import BaseModel, Field


class TagResponse(BaseModel):
    """Resolved version tag for a compiled unit."""

    unit: str = Field(..., description="Unit reference as requested")
    key: str = Field(..., description="Canonical unit key, e.g. module:mylib")
    tag: str = Field(..., description="Version tag value")
    provider: str = Field("", description="Provider that produced the tag")


class UrlResponse(BaseModel):
    """Versioned asset URL."""

    url: str
    tag: str


class HealthResponse(BaseModel):
    """Service health and registered providers."""

    status: str
    providers: list[str]
