"""URL shortening utilities module.

This module handles the generation and validation of short codes and the
normalization of submitted URLs.
"""

import re
import secrets
from typing import Optional
from urllib.parse import urlsplit

from ..core.config import settings
from ..core.exceptions import (
    BadLengthError,
    EmptyURLError,
    MalformedURLError,
    NonAlphanumericError,
)

SHORT_CODE_PATTERN = re.compile(r"^[a-zA-Z0-9]+$")

ALLOWED_SCHEMES = ("http", "https")


def generate_short_code(num_bytes: Optional[int] = None) -> str:
    """Generate a random lowercase hex short code.

    Args:
        num_bytes: Number of random bytes. Defaults to settings value, which
            yields an 8 character code.

    Returns:
        Random short code string.
    """
    num_bytes = num_bytes or settings.generated_code_bytes
    return secrets.token_hex(num_bytes)


def validate_short_code(code: str) -> None:
    """Validate custom short code format.

    Args:
        code: Short code to validate.

    Raises:
        BadLengthError: If the code is outside the allowed length range.
        NonAlphanumericError: If the code contains characters other than
            ASCII letters and digits.
    """
    min_length = settings.min_short_code_length
    max_length = settings.max_short_code_length
    if len(code) < min_length or len(code) > max_length:
        raise BadLengthError(
            f"Shortcode must be {min_length}-{max_length} characters"
        )
    if not SHORT_CODE_PATTERN.match(code):
        raise NonAlphanumericError()


def validate_url(url: str) -> str:
    """Validate and normalize a submitted URL.

    URLs without an http/https prefix get ``https://`` prepended.

    Args:
        url: URL to validate.

    Returns:
        Normalized URL string.

    Raises:
        EmptyURLError: If the URL is empty.
        MalformedURLError: If the URL has no usable scheme or host.
    """
    url = (url or "").strip()
    if not url:
        raise EmptyURLError()
    if not url.startswith(("http://", "https://")):
        url = "https://" + url

    try:
        parts = urlsplit(url)
        hostname = parts.hostname
        # Accessing the port validates it
        parts.port
    except ValueError as e:
        raise MalformedURLError(f"Invalid URL format: {e}") from e

    if parts.scheme not in ALLOWED_SCHEMES or not hostname:
        raise MalformedURLError()
    if any(ch.isspace() for ch in url):
        raise MalformedURLError("Invalid URL format: whitespace in URL")
    return url


def create_short_url(base_url: str, short_code: str) -> str:
    """Create full short URL from base URL and short code.

    Args:
        base_url: Base URL of the service.
        short_code: Short code.

    Returns:
        Full short URL string.
    """
    return f"{base_url.rstrip('/')}/{short_code}"
