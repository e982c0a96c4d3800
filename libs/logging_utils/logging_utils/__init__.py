"""Logging utilities for the order events service."""

from .config import get_http_logger, setup_service_logger

__all__ = [
    "setup_service_logger",
    "get_http_logger",
]
