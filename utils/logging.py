"""
Logging Configuration Module

Console logging for the calculator backend: colored lines for local runs,
one JSON object per line when LOG_JSON is set.

Usage:
    from utils.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Session started", extra={"language": "en"})
    logger.error("Webhook failed", exc_info=True)
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from config.settings import settings


# Attributes every LogRecord carries; anything else came in through ``extra``
_RECORD_ATTRIBUTES = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def record_extras(record: logging.LogRecord) -> Dict[str, Any]:
    """Fields attached to a record with ``logger.x(..., extra={...})``."""
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRIBUTES and not key.startswith("_")
    }


# =============================================================================
# Custom Formatters
# =============================================================================

class ColoredFormatter(logging.Formatter):
    """
    Colored console formatter.

    Extra fields are appended as ``key=value`` pairs. The record itself is
    left untouched so other handlers see the plain level name.
    """

    COLORS = {
        logging.DEBUG: "\033[36m",      # Cyan
        logging.INFO: "\033[32m",       # Green
        logging.WARNING: "\033[33m",    # Yellow
        logging.ERROR: "\033[31m",      # Red
        logging.CRITICAL: "\033[1;31m", # Bold Red
    }
    RESET = "\033[0m"

    def formatMessage(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelno, "")
        values = dict(vars(record), levelname=f"{color}{record.levelname:8}{self.RESET}")
        text = self._style._fmt % values

        extras = record_extras(record)
        if extras:
            text += " │ " + " ".join(f"{key}={value}" for key, value in extras.items())
        return text


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for log aggregators."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extras = record_extras(record)
        if extras:
            log_data["extra"] = extras

        return json.dumps(log_data, default=str, ensure_ascii=False)


# =============================================================================
# Logger Configuration
# =============================================================================

def setup_logging(
    level: Optional[str] = None,
    json_format: Optional[bool] = None
) -> None:
    """
    Configure the root logger with a single stdout handler.

    Args:
        level: Log level name; DEBUG when settings.DEBUG, else INFO
        json_format: Emit JSON lines; defaults to settings.LOG_JSON
    """
    if level is None:
        level = "DEBUG" if settings.DEBUG else "INFO"
    if json_format is None:
        json_format = settings.LOG_JSON

    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(ColoredFormatter(
            fmt="%(asctime)s │ %(levelname)s │ %(name)s │ %(message)s",
            datefmt="%H:%M:%S"
        ))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # Per-keystroke preview and webhook traffic would drown the console
    for noisy in ("httpx", "httpcore", "asyncio", "uvicorn.access", "multipart"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Module logger; use ``get_logger(__name__)``."""
    return logging.getLogger(name)


# =============================================================================
# Convenience Functions
# =============================================================================

def log_api_call(
    service: str,
    endpoint: str,
    success: bool,
    duration_ms: Optional[float] = None,
    error: Optional[str] = None
) -> None:
    """
    Log an outbound HTTP call on one line.

    Args:
        service: Name of the remote service (e.g., "Webhook")
        endpoint: URL called
        success: Whether the call succeeded
        duration_ms: Call duration in milliseconds
        error: Error message if failed
    """
    logger = get_logger("api")

    status = "✅" if success else "❌"
    msg = f"{status} {service} | {endpoint}"
    if duration_ms is not None:
        msg += f" | {duration_ms:.0f}ms"

    if success:
        logger.info(msg)
    else:
        logger.error(f"{msg} | Error: {error}")


def log_calculation(
    equation: str,
    result: str,
    source: str,
    language: Optional[str] = None
) -> None:
    """
    Log a finished calculation on one line.

    Failures log at WARNING so a stream of MATH_ERROR results stands out.
    """
    logger = get_logger("calc")

    failed = result.startswith("MATH_ERROR")
    status = "❌" if failed else "✅"
    logger.log(
        logging.WARNING if failed else logging.INFO,
        f"{status} {source.upper()} | {equation} = {result}",
        extra={"source": source, "language": language},
    )
