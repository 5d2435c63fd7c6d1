"""JSON structured logging configuration."""
import json
import logging
import os
import sys
from datetime import datetime, timezone

# Pipeline fields copied from ``extra=`` into the JSON entry when present.
CONTEXT_FIELDS = ("seed", "channel", "output_path", "url", "status_code", "transport")


class JSONFormatter(logging.Formatter):
    """Render a record as one JSON line.

    Always present: timestamp, level, service (logger name) and message.
    Any CONTEXT_FIELDS passed through ``extra=`` are added as-is (paths are
    stringified), and an attached exception adds error_type and
    error_detail.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "service": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value if isinstance(value, (int, float, bool)) else str(value)
        if record.exc_info and record.exc_info[0] is not None:
            entry["error_type"] = record.exc_info[0].__name__
            entry["error_detail"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(service_name: str = "img2img-relay") -> logging.Logger:
    """Configure and return a JSON structured logger.

    The level comes from LOG_LEVEL (default INFO). A handler is attached only
    once per logger name, so repeated calls are safe.
    """
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    logger = logging.getLogger(service_name)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)

    return logger
