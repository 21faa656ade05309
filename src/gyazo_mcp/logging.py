"""Centralized logging configuration using loguru.

The stdio transport owns stdout for protocol messages, so every handler
installed here writes to stderr (or a file), never stdout.

Example:
    from gyazo_mcp.logging import setup_logging

    setup_logging(level="DEBUG")

    from loguru import logger
    logger.info("Server started")

"""

import logging
import sys
from typing import Any

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Third-party loggers that use the standard library and are chatty at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "mcp", "fastmcp")


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: str | None = None,
) -> Any:
    """Configure loguru for the server.

    Should be called once at startup, before the transport starts.

    Args:
        level: Minimum log level to capture. One of: DEBUG, INFO, WARNING, ERROR, CRITICAL.
        json_output: If True, output logs as serialized JSON records.
        log_file: Optional file path to write logs to. If None, logs only to stderr.

    Returns:
        The configured loguru logger instance.

    """
    logger.remove()

    if json_output:
        logger.add(sys.stderr, format="{message}", serialize=True, level=level)
    else:
        logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file:
        logger.add(
            log_file,
            format=CONSOLE_FORMAT,
            level=level,
            rotation="10 MB",
            retention="7 days",
            compression="gz",
        )

    # Request URLs logged by httpx carry the access token as a query parameter
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger

