"""Logging setup: one line per record, tagged with the current request id."""

import logging
from contextvars import ContextVar

# Request id of the request being served; "system" for startup, events and scripts.
request_id_var: ContextVar[str] = ContextVar("request_id", default="system")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%SZ"


class RequestIdFilter(logging.Filter):
    """Attach request_id to every record so the format string can use it."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()
        return True


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once; later calls only adjust the level."""
    root = logging.getLogger()
    if not any(isinstance(f, RequestIdFilter) for h in root.handlers for f in h.filters):
        logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
        for handler in root.handlers:
            handler.addFilter(RequestIdFilter())
    root.setLevel(level)
