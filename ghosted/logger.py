"""Logger setup for ghosted.

Provides the loguru configuration shared by the CLI and the fetch engine.
Context-specific wrappers live next to the code that uses them (for example
``ghosted/fetch/logger.py``).
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from ghosted.config import settings

CONSOLE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"


def setup_logger(level: Optional[str] = None, log_file: Optional[Path] = None) -> None:
    """Configure loguru sinks.

    Removes loguru's default handler and installs a colorized stderr sink at
    *level* (``settings.log_level`` when omitted).  When *log_file* is given a
    second sink captures everything at DEBUG.

    Args:
        level: Minimum level for the console sink (e.g. ``"DEBUG"``).
        log_file: Optional file that receives DEBUG-and-above records.
    """
    logger.remove()

    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level=(level or settings.log_level).upper(),
        colorize=True,
    )

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
