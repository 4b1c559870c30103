# climb_mate/logging_config.py
"""
Logging bootstrap for the CLI and desktop entry points.

climb_mate disables its own loguru output on import so that library callers
see nothing unless they opt in. setup_logging() is that opt-in.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger


PACKAGE_NAME = "climb_mate"

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def normalize_level(name: str) -> str:
    """Upper-cased loguru level name. Raises ValueError for unknown levels."""
    lvl = str(name).strip().upper()
    logger.level(lvl)
    return lvl


class InterceptHandler(logging.Handler):
    """Redirect stdlib logging records (e.g. from Qt helpers) to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1
        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(
    level: str = "INFO",
    console: bool = True,
    file_path: Optional[Union[str, Path]] = None,
    rotation: Optional[str] = "10 MB",
    retention: Optional[str] = "7 days",
) -> None:
    lvl = normalize_level(level)
    logger.remove()
    if console:
        logger.add(sys.stderr, level=lvl, format=CONSOLE_FORMAT, backtrace=False, diagnose=False)
    if file_path:
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(file_path),
            level=lvl,
            rotation=rotation,
            retention=retention,
            encoding="utf-8",
            backtrace=True,
            diagnose=False,
        )
    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(getattr(logging, lvl, logging.INFO))
    logger.enable(PACKAGE_NAME)
