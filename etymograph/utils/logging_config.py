"""
Logging configuration for the etymograph application.

This module sets up structured logging with both file and console outputs,
using different formats and levels for different handlers.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from etymograph.config import LOG_CONFIG

# Default log format with colors for console
CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Detailed format for file logging
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | "
    "{level: <8} | "
    "{name}:{function}:{line} | "
    "process:{process} | "
    "{message}"
)

VALID_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def setup_logging(
    log_path: Optional[str] = None,
    console_level: str = LOG_CONFIG["level"],
    file_level: str = LOG_CONFIG["file_level"]
) -> None:
    """
    Configure logging with a console handler and an optional file handler.

    Args:
        log_path: Path to log file, or None for console-only logging
        console_level: Minimum level for console output
        file_level: Minimum level for file output

    Raises:
        ValueError: If either level is not a loguru level name
    """
    for level in (console_level, file_level):
        if level.upper() not in VALID_LEVELS:
            raise ValueError(
                f"Invalid log level: {level}. Must be one of: {', '.join(VALID_LEVELS)}"
            )

    # Remove default handler
    logger.remove()

    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level=console_level.upper(),
        colorize=True,
        backtrace=True,
        diagnose=False
    )

    if log_path:
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=file_level.upper(),
            rotation=LOG_CONFIG["rotation"],
            retention=LOG_CONFIG["retention"],
            compression=LOG_CONFIG["compression"],
            backtrace=True,
            diagnose=False
        )

    logger.info("Logging system initialized")
