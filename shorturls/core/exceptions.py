"""Exceptions raised by the short URL registry and validators.

Every error carries the HTTP status the request layer answers with, so a
single exception handler can turn any of them into a JSON error response.
"""


class ShortenerError(Exception):
    """Base exception for all registry and validation errors."""

    status_code = 400
    default_message = "Request could not be processed"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class InvalidURLError(ShortenerError):
    """The submitted URL failed validation."""

    default_message = "Invalid URL"


class EmptyURLError(InvalidURLError):
    """The submitted URL is empty."""

    default_message = "URL cannot be empty"


class MalformedURLError(InvalidURLError):
    """The submitted URL has no usable scheme or host."""

    default_message = "Invalid URL format"


class InvalidShortCodeError(ShortenerError):
    """The requested custom short code failed validation."""

    default_message = "Invalid shortcode"


class BadLengthError(InvalidShortCodeError):
    default_message = "Shortcode must be 4-20 characters"


class NonAlphanumericError(InvalidShortCodeError):
    default_message = "Shortcode must be alphanumeric"


class CodeCollisionError(ShortenerError):
    """The requested custom short code is already in use."""

    status_code = 409
    default_message = "Shortcode already exists"


class NotFoundError(ShortenerError):
    """No record exists for the short code."""

    status_code = 404
    default_message = "Shortcode not found"


class ExpiredError(ShortenerError):
    """The record exists but its validity window has passed."""

    status_code = 404
    default_message = "Shortcode expired"


class GenerationExhaustedError(ShortenerError):
    """No unused short code was found within the attempt limit."""

    status_code = 503
    default_message = "Failed to generate unique short code"


class ValidityTooLargeError(ShortenerError):
    """The requested validity exceeds the allowed maximum."""

    default_message = "Validity too large"
