"""Structured logging setup.

GYMLOG_LOG_FORMAT selects "json" (one object per line, the default) or
"text". Attributes passed via ``extra`` with the ``gymlog_`` prefix end up
under ``context`` in JSON output, prefix stripped.
"""

import json
import logging
import sys
from datetime import datetime, timezone

EXTRA_PREFIX = "gymlog_"

# Chatty third-party loggers kept at WARNING regardless of our level
_QUIET_LOGGERS = ("psycopg", "asyncio")


class JSONFormatter(logging.Formatter):
    """Render each record as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        context = {
            key[len(EXTRA_PREFIX):]: value
            for key, value in record.__dict__.items()
            if key.startswith(EXTRA_PREFIX)
        }
        if context:
            entry["context"] = context

        if record.exc_info and record.exc_info[1] is not None:
            entry["exc_type"] = type(record.exc_info[1]).__name__
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


def setup_logging(log_format: str, level: int | str = logging.INFO) -> None:
    """Route all logging to stderr in the requested format."""
    handler = logging.StreamHandler(sys.stderr)
    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-7s %(name)s: %(message)s")
        )

    # force=True drops handlers left by an earlier call
    logging.basicConfig(level=level, handlers=[handler], force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
