"""Logging setup shared by the CLI, the API server and the library."""

from __future__ import annotations

import logging
import sys

from wpbook.config import WPBOOK_LOG_LEVEL

_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_CONTEXT_SKIP = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


class ContextFormatter(logging.Formatter):
    """Append ``extra=`` context to the rendered message as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _CONTEXT_SKIP and not key.startswith("_")
        }
        if not context:
            return message
        pairs = " ".join(f"{key}={value!r}" for key, value in sorted(context.items()))
        return f"{message} [{pairs}]"


def get_logger(name: str) -> logging.Logger:
    """Return a module logger. Library code never installs handlers."""
    return logging.getLogger(name)


def configure_logging(level: str | int | None = None) -> None:
    """Install a single stderr handler on the root logger.

    Args:
        level: Log level name or number. Defaults to ``WPBOOK_LOG_LEVEL``.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ContextFormatter(_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level if level is not None else WPBOOK_LOG_LEVEL.upper())

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
