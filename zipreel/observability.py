"""
Logging setup for ZipReel.

Modules log through ``logging.getLogger(__name__)`` and attach context
via ``extra={...}``.  :func:`setup_logging` installs one root handler
whose format follows the ``logging`` settings section: ``json`` emits one
JSON object per line including the known context fields, ``text`` a
human-readable line.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from zipreel.config import LoggingSettings, get_settings

_CONTEXT_FIELDS = (
    "user_id", "movie_id", "cache_key", "found_in", "result_count",
    "frequency", "entries_removed", "cache_level", "request_id", "error",
)


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _CONTEXT_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(settings: Optional[LoggingSettings] = None) -> logging.Handler:
    """Install the root handler described by *settings*.

    Returns:
        The handler that was added, so callers can remove it again.
    """
    settings = settings or get_settings().logging
    handler = logging.StreamHandler()
    if settings.format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, settings.level.upper(), logging.INFO))
    return handler
