"""Models package for URL Shortener Service."""

from .url import Click, ShortURLRecord, ShortURLStats, ShortURLCreate, ErrorResponse

__all__ = ["Click", "ShortURLRecord", "ShortURLStats", "ShortURLCreate", "ErrorResponse"]
