from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from core.settings import LOG_PATH, LOGGING


ROOT_LOGGER = "planner"


def configure_logging(log_path: Optional[Path] = None, *, level: Optional[int] = None) -> logging.Logger:
    """Attach a rotating file handler to the ``planner`` logger hierarchy once."""

    logger = logging.getLogger(ROOT_LOGGER)
    target = Path(log_path or LOG_PATH)
    if not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        target.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            target,
            maxBytes=LOGGING.max_bytes,
            backupCount=LOGGING.backup_count,
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(LOGGING.format))
        logger.addHandler(handler)
    logger.setLevel(level if level is not None else LOGGING.level)
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


__all__ = ["configure_logging", "get_logger", "ROOT_LOGGER"]
