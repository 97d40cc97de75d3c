"""
Fetch context logger.

Wraps loguru with an automatic [fetch] prefix.  All fetch modules log through
these helpers rather than importing loguru directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[fetch]"


def _log_info(message: str) -> None:
    """Log info message with [fetch] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [fetch] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [fetch] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [fetch] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")
