"""Schemas package for URL Shortener Service."""

from .url import (
    ShortURLCreateResponse,
    ShortURLStatsResponse,
    HealthResponse,
)

__all__ = [
    "ShortURLCreateResponse",
    "ShortURLStatsResponse",
    "HealthResponse",
]
