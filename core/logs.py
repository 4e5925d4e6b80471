"""Logger setup shared by the store and the command bridge."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from core.settings import LOGGING, LogSettings


ROOT_LOGGER = "toolbox"


def ensure_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger in the ``toolbox`` namespace.

    Child loggers propagate to the root ``toolbox`` logger, which owns the
    file handler once :func:`configure_logging` has run.
    """

    if not name:
        return logging.getLogger(ROOT_LOGGER)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def configure_logging(
    settings: LogSettings = LOGGING,
    *,
    level: Optional[str] = None,
    path: Optional[Path] = None,
    sql_echo: bool = False,
) -> logging.Logger:
    """Attach the rotating file handler once and set the level.

    With ``sql_echo`` the SQLAlchemy engine log goes to the same file; the
    engine's own ``echo`` would print to stdout, which carries replies.
    """

    logger = logging.getLogger(ROOT_LOGGER)
    target = Path(path or settings.path)
    handler = next((h for h in logger.handlers if isinstance(h, RotatingFileHandler)), None)
    if handler is None:
        target.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            target,
            maxBytes=settings.max_bytes,
            backupCount=settings.backup_count,
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(settings.format))
        logger.addHandler(handler)
    logger.setLevel((level or settings.level).upper())

    if sql_echo:
        sql_logger = logging.getLogger("sqlalchemy.engine")
        if handler not in sql_logger.handlers:
            sql_logger.addHandler(handler)
        sql_logger.setLevel(logging.INFO)
    return logger


__all__ = ["ROOT_LOGGER", "configure_logging", "ensure_logger"]
