"""
Logging utilities for safe structured logging.

Chunk metadata and vectors can be large; these helpers summarize values
before they land in a log record's extra fields.

Dependencies: logging (stdlib)
System role: Logging helper functions for the ingestion pipeline
"""

import logging
from typing import Any

# LogRecord attributes that cannot be overwritten through ``extra``
RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime"}


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Convert a value to a bounded string for logging.

    Sequences and mappings are summarized by size rather than dumped, so an
    embedding vector never ends up in the logs.

    Args:
        value: Value to convert
        max_length: Maximum length before truncating

    Returns:
        str: Safe string representation
    """
    if value is None:
        return "None"
    if isinstance(value, str):
        val_str = value
    elif isinstance(value, (list, tuple)):
        val_str = f"{type(value).__name__}({len(value)} items)"
    elif isinstance(value, dict):
        val_str = f"dict({len(value)} keys)"
    else:
        val_str = str(value)

    if len(val_str) > max_length:
        return val_str[:max_length] + f"... (truncated, {len(val_str)} total)"
    return val_str


def _safe_extra(context: dict[str, Any]) -> dict[str, str]:
    return {
        (f"ctx_{key}" if key in RESERVED_ATTRS else key): safe_log_value(val)
        for key, val in context.items()
    }


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context: Any,
) -> None:
    """
    Log a message with structured context, safely converting all values.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Arbitrary key-value context (document_id, chunk_id, ...)
    """
    logger.log(level, message, extra=_safe_extra(context))


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    level: int = logging.ERROR,
    **context: Any,
) -> None:
    """
    Log an exception with its type, message and traceback.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance
        level: Log level (ERROR by default)
        **context: Additional context
    """
    safe_context = _safe_extra(context)
    safe_context.update(
        {
            "error_type": type(exc).__name__,
            "error_msg": safe_log_value(str(exc)),
        }
    )
    logger.log(level, message, extra=safe_context, exc_info=exc)
