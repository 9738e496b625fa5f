"""
Logging Configuration — Console and JSON logging for mirror runs.

Two output styles:
- text: short lines for an interactive terminal, coloured on a TTY
- json: one object per line, for CI jobs that ship logs somewhere

The `short_id` and `phase` extras passed by the engine become separate
keys in JSON output.

## Environment Variables

- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_FORMAT: json, text (default: text)

## Usage

    from shadow_activity.logging_config import setup_logging

    setup_logging()                # from the environment
    setup_logging(level="DEBUG")   # --debug
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import IO, Any, Dict, Optional

EXTRA_FIELDS = ("short_id", "phase")


class JSONFormatter(logging.Formatter):
    """
    Output format:
    {"ts": "...", "level": "...", "logger": "...", "message": "...", "short_id": "..."}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in EXTRA_FIELDS:
            if hasattr(record, name):
                log_entry[name] = getattr(record, name)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


class HumanFormatter(logging.Formatter):
    """
    Output format:
    12:34:56 WARNING [engine  ] Skipping zero-diff commit: 3f2a9c1
    """

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, color: bool = False):
        super().__init__()
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        time_str = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        level = f"{record.levelname:7}"
        if self.color:
            level = f"{self.COLORS.get(record.levelname, '')}{level}{self.RESET}"

        module = record.name.split(".")[-1][:8]
        line = f"{time_str} {level} [{module:8}] {record.getMessage()}"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    level: Optional[str] = None,
    format_type: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """
    Configure the root logger with a single handler.

    Args:
        level: Log level name. Defaults to LOG_LEVEL or INFO;
               unknown names fall back to INFO.
        format_type: "json" or "text". Defaults to LOG_FORMAT or text.
        stream: Where to write (default: stderr, keeping stdout for
                command output such as --json reports).
    """
    log_level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    log_format = (format_type or os.environ.get("LOG_FORMAT", "text")).lower()
    numeric_level = getattr(logging, log_level, logging.INFO)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    target = stream or sys.stderr

    formatter: logging.Formatter
    if log_format == "json":
        formatter = JSONFormatter()
    else:
        formatter = HumanFormatter(color=target.isatty())

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()

    handler = logging.StreamHandler(target)
    handler.setFormatter(formatter)
    handler.setLevel(numeric_level)
    root.addHandler(handler)

    logging.getLogger(__name__).debug(
        f"Logging configured: level={logging.getLevelName(numeric_level)}, format={log_format}"
    )
