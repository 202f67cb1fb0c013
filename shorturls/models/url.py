"""Pydantic models for URL Shortener Service."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Click(BaseModel):
    """A single resolution of a short code."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    source: str = "direct"
    location: str = "unknown"


class ShortURLRecord(BaseModel):
    """Registry entry for a short code.

    Only ``click_count`` and ``click_history`` change after creation, and only
    through ``Registry.record_click``.
    """

    code: str = Field(..., frozen=True)
    original_url: str = Field(..., frozen=True)
    created_at: datetime = Field(..., frozen=True)
    expires_at: datetime = Field(..., frozen=True)
    click_count: int = 0
    click_history: list[Click] = Field(default_factory=list)

    def is_expired(self, now: datetime) -> bool:
        """Return True once ``now`` is past the expiry timestamp."""
        return now > self.expires_at


class ShortURLStats(BaseModel):
    """Point-in-time copy of a record's analytics."""

    total_clicks: int
    created_at: datetime
    expires_at: datetime
    clicks: list[Click]


class ShortURLCreate(BaseModel):
    """Model for creating a short URL."""

    url: Optional[str] = Field(None, description="The original long URL to shorten")
    validity: Optional[int] = Field(
        None, description="Lifetime in minutes, defaults to 30"
    )
    shortcode: Optional[str] = Field(None, description="Custom short code")


class ErrorResponse(BaseModel):
    """Model for error responses."""

    error: str
    message: str
