"""Logging setup shared by the library and the HTTP server."""

from __future__ import annotations

import logging
import sys

from pagecraft.config import PAGECRAFT_LOG_LEVEL

_STANDARD_RECORD_KEYS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime"}

_configured = False


class ExtraFormatter(logging.Formatter):
    """Formatter that appends ``extra={...}`` fields as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_RECORD_KEYS and not key.startswith("_")
        }
        if not extras:
            return message
        pairs = " ".join(f"{key}={value!r}" for key, value in sorted(extras.items()))
        return f"{message} | {pairs}"


def configure_logging(level: str | int | None = None) -> None:
    """Install a stderr handler on the root logger (idempotent)."""
    global _configured
    root = logging.getLogger()
    if level is not None:
        root.setLevel(level)
    if _configured:
        return
    if level is None:
        root.setLevel(PAGECRAFT_LOG_LEVEL)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ExtraFormatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger after making sure logging is configured."""
    configure_logging()
    return logging.getLogger(name)
