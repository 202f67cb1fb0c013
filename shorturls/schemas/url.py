"""Response schemas for URL Shortener Service."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..models.url import Click


class ShortURLCreateResponse(BaseModel):
    """Response model for created short URL."""

    model_config = ConfigDict(populate_by_name=True)

    short_link: str = Field(..., alias="shortLink")
    expiry: datetime


class ShortURLStatsResponse(BaseModel):
    """Response model for short URL statistics."""

    model_config = ConfigDict(populate_by_name=True)

    total_clicks: int = Field(..., alias="totalClicks")
    created_at: datetime = Field(..., alias="createdAt")
    expires_at: datetime = Field(..., alias="expiresAt")
    clicks: list[Click]


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str
    message: str
    time: datetime
