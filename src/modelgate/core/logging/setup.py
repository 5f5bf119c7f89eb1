from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable
from logging.handlers import RotatingFileHandler

from .json_formatter import JSONFormatter

_LOGGER_NAME = "modelgate"
# Set on handlers we install; the value names the sink so reconfiguring never duplicates it.
_SINK_ATTR = "_modelgate_log_sink"


def _parse_level(raw: str) -> int:
    return getattr(logging, raw.strip().upper(), logging.INFO)


def _install(logger: logging.Logger, sink: str, build: Callable[[], logging.Handler]) -> None:
    if any(getattr(handler, _SINK_ATTR, None) == sink for handler in logger.handlers):
        return
    handler = build()
    handler.setFormatter(JSONFormatter())
    setattr(handler, _SINK_ATTR, sink)
    logger.addHandler(handler)


def configure_logging() -> logging.Logger:
    """Attach JSON handlers to the ``modelgate`` logger; safe to call repeatedly."""

    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(_parse_level(os.getenv("MODELGATE_LOG_LEVEL", "INFO")))
    logger.propagate = False

    _install(logger, "stdout", lambda: logging.StreamHandler(stream=sys.stdout))

    log_file = os.getenv("MODELGATE_LOG_FILE", "").strip()
    if log_file:
        log_path = os.path.abspath(os.path.expanduser(log_file))
        os.makedirs(os.path.dirname(log_path), exist_ok=True)
        _install(
            logger,
            log_path,
            lambda: RotatingFileHandler(
                filename=log_path,
                maxBytes=int(os.getenv("MODELGATE_LOG_MAX_BYTES", "5000000")),
                backupCount=int(os.getenv("MODELGATE_LOG_BACKUP_COUNT", "5")),
                encoding="utf-8",
            ),
        )

    return logger
