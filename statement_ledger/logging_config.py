"""
Structured logging configuration.

Every module logs through logging.getLogger(__name__), so all
records end up under the "statement_ledger" logger configured here.
"""

import json
import logging
from datetime import datetime, timezone

LOGGER_NAME = "statement_ledger"

# Attributes callers attach through `extra=` that we emit as fields
CONTEXT_FIELDS = ("actor_id", "receiver_id", "entry_id", "operation", "kind")


class JSONFormatter(logging.Formatter):
    """Render each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_entry[field] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a JSON stream handler to the application logger.

    Safe to call more than once: existing handlers are replaced,
    so records are never emitted twice.
    """
    logger = logging.getLogger(LOGGER_NAME)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False

    return logger
