"""Logging configuration for jira-pm.

All loggers live under the ``jira_pm`` namespace and log event names with
context in ``extra``. Output goes to stderr: under MCP stdio, stdout carries
the protocol stream.

Environment Variables:
    JIRA_PM_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR. Default: INFO
    JIRA_PM_LOG_FORMAT: text or json. Default: text
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional

SENSITIVE_KEYS = {"password", "token", "api_token", "secret", "authorization", "auth"}

# Attributes every LogRecord has; anything else came in through ``extra``
_STANDARD_FIELDS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "taskName",
}


def _extras(record: logging.LogRecord) -> dict:
    return {
        k: ("[REDACTED]" if k.lower() in SENSITIVE_KEYS else v)
        for k, v in record.__dict__.items()
        if k not in _STANDARD_FIELDS and not k.startswith("_")
    }


class StructuredFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message, context."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extras = _extras(record)
        if extras:
            log_data["context"] = extras
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable formatter; appends ``extra`` context as key=value."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        extras = _extras(record)
        if extras:
            text += " " + " ".join(f"{k}={v}" for k, v in extras.items())
        return text


def configure_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Configure the ``jira_pm`` logger hierarchy.

    Args:
        level: Log level override; defaults to ``JIRA_PM_LOG_LEVEL`` or INFO.
        log_format: "text" or "json"; defaults to ``JIRA_PM_LOG_FORMAT`` or text.
    """
    if level is None:
        level = os.getenv("JIRA_PM_LOG_LEVEL", "INFO")
    log_level = getattr(logging, level.upper(), logging.INFO)

    if log_format is None:
        log_format = os.getenv("JIRA_PM_LOG_FORMAT", "text")
    formatter = StructuredFormatter() if log_format.lower() == "json" else TextFormatter()

    logger = logging.getLogger("jira_pm")
    logger.setLevel(log_level)

    # Idempotent: reconfiguring swaps the formatter instead of adding handlers
    if not logger.handlers:
        logger.addHandler(logging.StreamHandler(sys.stderr))
    for handler in logger.handlers:
        handler.setFormatter(formatter)

    logger.propagate = False
