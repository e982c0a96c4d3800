"""Logging configuration shared by the service and its API clients."""

import sys
from typing import Optional

from loguru import logger as loguru_logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def setup_service_logger(
    service_name: str,
    log_level: str = "INFO",
    log_file: Optional[str] = None,
) -> loguru_logger:
    """Configure the process logger for a service with standardized settings.

    Args:
        service_name: Name of the service (e.g., 'order-events-service')
        log_level: Logging level (default: INFO)
        log_file: Optional path to log file

    Returns:
        logger: Configured loguru logger instance
    """
    # Remove any existing handlers
    loguru_logger.remove()

    loguru_logger.add(
        sys.stderr,
        level=log_level,
        format=LOG_FORMAT,
        colorize=True,
        enqueue=True,
        backtrace=True,
        diagnose=True,
    )

    if log_file:
        loguru_logger.add(
            log_file,
            level=log_level,
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
            rotation="10 MB",
            retention="1 week",
            compression="gz",
        )

    return loguru_logger.bind(service=service_name)


def get_http_logger(service_name: str, vendor: str) -> loguru_logger:
    """Get a logger for calls made to an external HTTP API.

    Sinks are not touched, so this is safe to call at import time from any
    client module once the service logger has been set up.

    Args:
        service_name: Name of the service
        vendor: Name of the remote API (e.g., 'shopify', 'klaviyo')

    Returns:
        logger: Logger bound with service and vendor context
    """
    return loguru_logger.bind(service=service_name, vendor=vendor)
