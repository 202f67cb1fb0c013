"""API package for URL Shortener Service."""

from .routes import health_router, urls_router

__all__ = ["health_router", "urls_router"]
