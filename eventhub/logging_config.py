"""Logging setup with a per-request id on every record."""
import logging
from contextvars import ContextVar
from typing import Optional

LOG_FORMAT = "%(asctime)s %(name)s [%(levelname)s] %(request_id)s - %(message)s"

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class RequestIdFilter(logging.Filter):
    """Adds the current request ID to the record if it exists."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or ""
        return True


def setup_logging(level: str = "INFO") -> None:
    """Attach a console handler to the ``eventhub`` logger (idempotent)."""
    logger = logging.getLogger("eventhub")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if any(getattr(h, "_eventhub_handler", False) for h in logger.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestIdFilter())
    handler._eventhub_handler = True
    logger.addHandler(handler)
