"""Logging setup.

Every record carries the correlation id of the request being handled, or
``-`` outside of a request.
"""

import json
import logging

from devserver.config import Settings
from devserver.middleware.request_id import current_request_id

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(request_id)s]: %(message)s"


class RequestIdLogFilter(logging.Filter):
    """Attach the active correlation id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = current_request_id.get()
        return True


class JsonLogFormatter(logging.Formatter):
    """One JSON object per record; tracebacks are kept inside the object."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "name": record.name,
            "request_id": getattr(record, "request_id", "-"),
            "message": record.getMessage(),
        }
        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            entry["exc_text"] = record.exc_text
        if record.stack_info:
            entry["stack_info"] = self.formatStack(record.stack_info)
        return json.dumps(entry)


def configure_logging(settings: Settings) -> None:
    """Install root handlers; uvicorn loggers propagate into them."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=TEXT_FORMAT,
        force=True,
    )
    for handler in logging.getLogger().handlers:
        if not settings.dev_mode:
            handler.setFormatter(JsonLogFormatter())
        handler.addFilter(RequestIdLogFilter())
