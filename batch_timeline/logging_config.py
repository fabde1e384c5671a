"""Structured logging configuration with correlation ID and farm context."""

import json
import logging
from contextvars import ContextVar
from datetime import datetime, timezone

# Context variable to store the current request's correlation ID
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

# Attributes every LogRecord carries; anything else came in through ``extra``
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "correlation_id",
    "farm_id",
}


class JsonFormatter(logging.Formatter):
    """Formats log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, object] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", "") or "N/A",
            "farm_id": getattr(record, "farm_id", "") or "N/A",
        }

        # Fields passed via ``extra`` (batch_id, counts, ...)
        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_entry[key] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class ContextFilter(logging.Filter):
    """Stamps every record with the correlation ID and the configured farm."""

    def __init__(self, farm_id: str = ""):
        super().__init__()
        self.farm_id = farm_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get()
        record.farm_id = self.farm_id
        return True


def configure_logging(log_level: str = "INFO", farm_id: str = "") -> None:
    """
    Set up JSON logging on the root logger.

    Idempotent: the JSON handler is installed once; later calls only update
    the level and the farm stamped on records.

    Args:
        log_level: Logging level string (e.g. "INFO", "DEBUG").
        farm_id: Farm identifier added to every record.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level.upper())

    for handler in root_logger.handlers:
        if isinstance(handler.formatter, JsonFormatter):
            for existing in handler.filters:
                if isinstance(existing, ContextFilter):
                    existing.farm_id = farm_id
            return

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    handler.addFilter(ContextFilter(farm_id=farm_id))
    root_logger.addHandler(handler)
