"""Logger factory shared by services and the dashboard core."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from app.core.config import settings

_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"
_ROOT_NAME = "client_dashboard"


def _configure_root() -> logging.Logger:
    root = logging.getLogger(_ROOT_NAME)
    if getattr(root, "_app_configured", False):
        return root

    root.setLevel(settings.log_level.upper())
    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)

    console = logging.StreamHandler()
    console.setFormatter(fmt)
    root.addHandler(console)

    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            log_path, maxBytes=1_000_000, backupCount=5, encoding="utf-8"
        )
        fh.setFormatter(fmt)
        root.addHandler(fh)

    root._app_configured = True  # type: ignore[attr-defined]
    return root


def get_logger(name: str) -> logging.Logger:
    """
    Return a child of the application logger.

    Handlers are attached once to the application root, so child loggers
    propagate there (and to pytest's caplog).
    """
    _configure_root()
    return logging.getLogger(f"{_ROOT_NAME}.{name}")
