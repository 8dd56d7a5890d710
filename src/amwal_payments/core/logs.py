"""
Structured log records for the client, written through :mod:`logging`.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Mapping

__all__ = ["PACKAGE_LOGGER", "attach_log_file", "log_event"]

PACKAGE_LOGGER = "amwal_payments"

LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def log_event(log: logging.Logger, level: int, message: str, context: Mapping[str, Any]) -> None:
    """Emit ``message`` followed by ``context`` rendered as JSON."""
    if log.isEnabledFor(level):
        log.log(level, "%s %s", message, json.dumps(context, default=str))


def attach_log_file(path: str, level: int = logging.DEBUG) -> logging.Handler:
    """
    Append the package's records to ``path``. Calling this again with the
    same path returns the handler that is already installed.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    target = os.path.abspath(path)
    for handler in package_logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
            return handler

    handler = logging.FileHandler(target, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    package_logger.addHandler(handler)
    if package_logger.level == logging.NOTSET or package_logger.level > level:
        package_logger.setLevel(level)
    return handler
