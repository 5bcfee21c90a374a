"""
Observability module.

Provides logging configuration and structured logging helpers.
"""

from chunkbridge.observability.logger import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
