"""
chainflow/logger.py
-------------------
Handlers for the package loggers. ``configure_logging()`` is called once by
``entry.main``; libraries embedding chainflow usually configure logging
themselves and skip it.
"""
from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, Optional, Union

from .config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DEFAULT_LOGGERS = ("chainflow", "aiogram")


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        level = settings.LOG_LEVEL
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def configure_logging(
    log_file: Optional[str] = None,
    level: Union[int, str, None] = None,
    loggers: Iterable[str] = DEFAULT_LOGGERS,
) -> None:
    """Attach a rotating file handler and a console handler to ``loggers``.

    ``log_file`` and ``level`` default to ``LOG_FILE`` / ``LOG_LEVEL`` from the
    settings. Loggers that already write to ``log_file`` are left alone.
    """
    path = Path(log_file or settings.LOG_FILE)
    path.parent.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(LOG_FORMAT)
    resolved = _resolve_level(level)

    for name in loggers:
        target = logging.getLogger(name)
        target.setLevel(resolved)
        if any(
            isinstance(h, RotatingFileHandler) and h.baseFilename == os.path.abspath(path)
            for h in target.handlers
        ):
            continue

        file_handler = RotatingFileHandler(path, maxBytes=2_000_000, backupCount=5)
        console_handler = logging.StreamHandler()
        for handler in (file_handler, console_handler):
            handler.setFormatter(formatter)
            target.addHandler(handler)


logger = logging.getLogger("chainflow")
