"""Utils package for URL Shortener Service."""

from .shortener import (
    generate_short_code,
    validate_short_code,
    validate_url,
    create_short_url,
)

__all__ = [
    "generate_short_code",
    "validate_short_code",
    "validate_url",
    "create_short_url",
]
