"""
Logging setup.

Configures loguru sinks for the ledger processes (scheduler, workers,
scripts).
"""

import sys

from loguru import logger

from app.config.settings import settings


def setup_logging(log_file: str | None = None, level: str | None = None) -> None:
    """
    Configure logger with stderr output and file rotation.

    Args:
        log_file: Log file path (defaults to settings.log_file; empty
            disables the file sink)
        level: Minimum log level (defaults to settings.log_level)
    """
    level = (level or settings.log_level).upper()
    log_file = settings.log_file if log_file is None else log_file

    logger.remove()
    logger.add(sys.stderr, level=level)
    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            level=level,
            encoding="utf-8",
        )
