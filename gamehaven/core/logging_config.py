"""
Structured JSON logging configuration.

Every record becomes one JSON object on stdout. Catalog operations attach
the ids they concern (user, game, transaction) and storage code attaches
the table and row count, so a log line can be traced back to the rows it
touched.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


# Context fields promoted to the top level of every JSON line
CONTEXT_FIELDS = ("user_id", "game_id", "transaction_id", "table", "count")

# Attributes every LogRecord carries; anything else came in via extra={...}
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}

# Third-party loggers that are too chatty below WARNING
_QUIET_LOGGERS = ("aiosqlite", "asyncio", "sqlalchemy.engine")


class JSONFormatter(logging.Formatter):
    """
    Render log records as single-line JSON.

    Fields:
    - timestamp: UTC, ISO 8601 with microseconds
    - level, message, logger
    - user_id / game_id / transaction_id / table / count when given
    - exception / stack_info when present
    - any other key passed through ``extra``

    Example output:
        {"timestamp": "2026-10-19T10:30:00.123456", "level": "INFO",
         "message": "Purchase recorded", "logger": "gamehaven.services.purchase",
         "user_id": 1, "transaction_id": 7, "count": 2}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).replace(tzinfo=None).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_data[field] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            log_data["stack_info"] = self.formatStack(record.stack_info)

        log_data.update({
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and key not in log_data
        })

        return json.dumps(log_data, default=str)


def setup_logging(level: str = "INFO", json_format: bool = True) -> None:
    """
    Install a single stdout handler on the root logger.

    Args:
        level: Root level name, case-insensitive (unknown names mean INFO)
        json_format: JSON lines when True, a plain one-line format otherwise

    Note:
        The composition root calls this once; existing root handlers are
        replaced.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if json_format:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Module logger; pass ``__name__``."""
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    user_id: Optional[int] = None,
    game_id: Optional[int] = None,
    transaction_id: Optional[int] = None,
    table: Optional[str] = None,
    count: Optional[int] = None,
    **extra_fields: Any
) -> None:
    """
    Log ``message`` with catalog context attached.

    Context values left as None are omitted from the record.

    Args:
        logger: Logger to write to
        level: Level name, case-insensitive ("info", "WARNING", ...)
        message: Log message
        user_id: User the operation concerns
        game_id: Game the operation concerns
        transaction_id: Transaction the operation concerns
        table: Table touched by the operation
        count: Row or subscriber count
        **extra_fields: Any further fields

    Example:
        log_with_context(logger, "info", "Purchase recorded",
                         user_id=1, transaction_id=7, count=2)
    """
    context = {
        "user_id": user_id,
        "game_id": game_id,
        "transaction_id": transaction_id,
        "table": table,
        "count": count,
    }
    extra = {key: value for key, value in context.items() if value is not None}
    extra.update(extra_fields)

    getattr(logger, level.lower())(message, extra=extra)
