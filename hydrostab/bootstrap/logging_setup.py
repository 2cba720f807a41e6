"""
bootstrap/logging_setup.py - Logging configuration

Configures the root logger once for the CLI and the API server. Library
modules only create loggers; they never attach handlers.
"""

from __future__ import annotations
from typing import IO, Optional
import json
import logging
import sys

from hydrostab.bootstrap.config import LoggingConfig

# Handlers installed by configure_logging, replaced on reconfiguration
_installed_handlers = []


class JSONFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(config: Optional[LoggingConfig] = None, stream: Optional[IO[str]] = None) -> None:
    """
    Configure application logging.

    Args:
        config: Level, format, optional log file and JSON toggle
        stream: Console stream; stderr by default so stdout stays clean for output
    """
    config = config or LoggingConfig()
    log_level = getattr(logging, config.level.upper(), logging.INFO)

    if config.json_logs:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(config.format)

    root_logger = logging.getLogger()
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    # Console handler
    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)
    _installed_handlers.append(console_handler)

    # File handler
    if config.log_file:
        file_handler = logging.FileHandler(config.log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        root_logger.addHandler(file_handler)
        _installed_handlers.append(file_handler)

    root_logger.setLevel(log_level)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
