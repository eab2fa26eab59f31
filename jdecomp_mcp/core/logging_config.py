"""
Logging configuration for jdecomp_mcp.

This module provides structured logging with JSON output option and log rotation.
"""

import logging
from logging.handlers import RotatingFileHandler
from typing import Any, Dict

import orjson

from jdecomp_mcp.core.config import get_config

_HUMAN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for attr in ("tool_name", "file_name", "decompiler", "execution_time_ms", "error_code"):
            if hasattr(record, attr):
                log_data[attr] = getattr(record, attr)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return orjson.dumps(log_data, default=str).decode("utf-8")


def setup_logging() -> None:
    """
    Configure logging for jdecomp_mcp.

    Logging configuration:
    - Log level from settings (default: INFO)
    - Log format from settings (default: human-readable)
    - Log file from settings (default: /tmp/jdecomp/app.log)
    - Log rotation: 10MB max size, keep 5 backup files
    """
    settings = get_config()
    log_level = settings.log_level.upper()
    log_format = settings.log_format.lower()
    log_file = settings.log_file

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        # Console-only logging is fine when the directory is not writable
        pass

    logger = logging.getLogger("jdecomp_mcp")
    logger.setLevel(getattr(logging, log_level, logging.INFO))
    logger.handlers.clear()

    # Console goes to stderr; stdout belongs to the stdio MCP transport
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(_HUMAN_FORMAT, datefmt=_DATE_FORMAT))
    logger.addHandler(console_handler)

    try:
        file_handler = RotatingFileHandler(
            str(log_file),
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)

        if log_format == "json":
            file_formatter: logging.Formatter = JSONFormatter()
        else:
            file_formatter = logging.Formatter(_HUMAN_FORMAT, datefmt=_DATE_FORMAT)

        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)
    except OSError as e:
        logger.warning(
            f"Could not create log file handler for {log_file}: {e}. "
            "Logging to console only."
        )

    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    if name == "jdecomp_mcp" or name.startswith("jdecomp_mcp."):
        return logging.getLogger(name)
    return logging.getLogger(f"jdecomp_mcp.{name}")
