"""Logging setup for URL Shortener Service.

Log records go to stderr and, when a log server URL is configured, are also
shipped to the remote log server. Shipping runs on a background thread so a
slow or unreachable log server never delays or fails a request.
"""

import logging
import queue
from datetime import datetime, timezone
from logging.handlers import QueueHandler, QueueListener
from typing import Optional

import httpx

from .config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Logger name segment -> package label expected by the log server
PACKAGES = {
    "routes": "route",
    "main": "handler",
    "registry": "service",
    "shortener": "domain",
}

LEVELS = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warn",
    logging.ERROR: "error",
    logging.CRITICAL: "fatal",
}


class LogServerHandler(logging.Handler):
    """Handler that POSTs each record to the log server as JSON."""

    def __init__(
        self,
        url: str,
        token: Optional[str] = None,
        timeout: float = 10.0,
        stack: str = "backend",
        client: Optional[httpx.Client] = None,
    ):
        super().__init__()
        self.url = url
        self.stack = stack
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self.client = client or httpx.Client(timeout=timeout, headers=headers)

    def package_for(self, record: logging.LogRecord) -> str:
        for segment in reversed(record.name.split(".")):
            if segment in PACKAGES:
                return PACKAGES[segment]
        return "service"

    def to_entry(self, record: logging.LogRecord) -> dict:
        return {
            "stack": self.stack,
            "level": LEVELS.get(record.levelno, "info"),
            "package": self.package_for(record),
            "message": record.getMessage(),
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
        }

    def emit(self, record: logging.LogRecord) -> None:
        try:
            response = self.client.post(self.url, json=self.to_entry(record))
            response.raise_for_status()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        self.client.close()
        super().close()


_listener: Optional[QueueListener] = None
_queue_handler: Optional[QueueHandler] = None


def setup_logging(level: Optional[str] = None, log_server_url: Optional[str] = None):
    """Configure application logging.

    Args:
        level: Log level name. Defaults to settings value.
        log_server_url: Remote log server endpoint. Defaults to settings
            value; remote shipping is off when neither is set.

    Returns:
        The package logger.
    """
    global _listener, _queue_handler

    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )
    package_logger = logging.getLogger("shorturls")

    log_server_url = log_server_url or settings.log_server_url
    if log_server_url and _listener is None:
        remote = LogServerHandler(
            log_server_url,
            token=settings.log_server_token,
            timeout=settings.log_server_timeout,
        )
        log_queue: queue.Queue = queue.Queue(-1)
        _listener = QueueListener(log_queue, remote)
        _listener.start()
        _queue_handler = QueueHandler(log_queue)
        package_logger.addHandler(_queue_handler)
        package_logger.info(f"Shipping logs to {log_server_url}")

    return package_logger


def shutdown_logging() -> None:
    """Flush and stop remote log shipping, if running."""
    global _listener, _queue_handler

    if _queue_handler is not None:
        logging.getLogger("shorturls").removeHandler(_queue_handler)
        _queue_handler = None
    if _listener is not None:
        _listener.stop()
        for handler in _listener.handlers:
            handler.close()
        _listener = None
