# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Structured JSON logging for centralpack.

Every log line is a single JSON object with four fixed fields plus whatever
context the caller attached through ``extra``:

  {"ts": "2026-...", "level": "WARNING", "module": "centralpack.release.artifacts.resolver",
   "msg": "Artifact missing, using placeholder", "artifact": "javadoc", ...}

Handlers live on the package logger ("centralpack") only. Module loggers are
plain children that propagate up to it, so `configure_logging` can change the
level or add a log file after modules have already grabbed their loggers at
import time.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = "centralpack"

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

# Attributes every LogRecord carries. Anything else on the record came in
# through `extra=` and belongs in the JSON output.
_RESERVED_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """Serialize a LogRecord into one JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            entry[key] = value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def _resolve_log_level(level_name: str) -> int:
    upper = level_name.upper()
    if upper not in _VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level '{level_name}'. Must be one of: {', '.join(sorted(_VALID_LOG_LEVELS))}"
        )
    return getattr(logging, upper)


def configure_logging(
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    (Re)build the handlers on the package logger.

    Safe to call more than once: existing handlers are closed and replaced,
    so the CLI can reconfigure after the config file has been read.

    Args:
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
        log_file: Optional file that receives the same JSON lines as stdout.

    Returns:
        The package logger.
    """
    level = _resolve_log_level(log_level)
    package_logger = logging.getLogger(PACKAGE_LOGGER)

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    formatter = JsonFormatter()

    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.setFormatter(formatter)
    package_logger.addHandler(stdout_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    package_logger.setLevel(level)
    package_logger.propagate = False
    return package_logger


def get_logger(name: str, log_level: Optional[str] = None) -> logging.Logger:
    """
    Return a logger that writes through the package's JSON handlers.

    Args:
        name: Logger name, normally ``__name__``. Names outside the
              ``centralpack`` namespace do not reach the JSON handlers.
        log_level: Optional per-logger level override.
    """
    if not logging.getLogger(PACKAGE_LOGGER).handlers:
        configure_logging()

    logger = logging.getLogger(name)
    if log_level is not None:
        logger.setLevel(_resolve_log_level(log_level))
    return logger
