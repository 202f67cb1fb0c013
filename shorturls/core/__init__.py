"""Core package - configuration, errors and logging.

The registry lives in ``shorturls.core.registry`` and is imported from there.
"""

from .config import settings, get_settings
from .logging import setup_logging, shutdown_logging

__all__ = [
    "settings",
    "get_settings",
    "setup_logging",
    "shutdown_logging",
]
