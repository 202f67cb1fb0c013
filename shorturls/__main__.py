"""Run the URL Shortener Service with uvicorn."""

import uvicorn

from .core.config import settings


def main():
    """Main entry point."""
    uvicorn.run("shorturls.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
