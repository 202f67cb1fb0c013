"""In-memory URL shortening service with click analytics."""

__version__ = "0.1.0"
