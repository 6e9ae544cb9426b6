"""
Logging configuration using loguru.

Library modules log through ``loguru.logger`` directly; the CLI calls
setup_logging() once at startup to choose level and sinks.
"""

import sys
from typing import Optional

from loguru import logger


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[str] = None,
    fmt: str = "<level>[{level.name}]</level> {message}",
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """
    Configure loguru with console and optional file output.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR).
        log_file: Path to log file. If None, only logs to stderr.
        fmt: Loguru format string.
        rotation: Log file rotation size.
        retention: How long to keep rotated logs.
    """
    logger.remove()
    logger.add(sys.stderr, level=level, format=fmt)

    if log_file:
        logger.add(
            log_file,
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
            rotation=rotation,
            retention=retention,
        )
