"""
Logging helpers for the ministry backend.

Log ids, counts and high-level events ("attendance recorded for
rehearsal_id=..., records=12", "scale published"). Never log:
- passwords or password hashes
- bearer tokens, JWT_SECRET or Supabase keys
- attendance notes, devotional or observation content
"""

import logging
import os
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_log_level(level: Union[int, str, None] = None) -> int:
    """
    Turn a level name ("debug", "INFO") or number into a logging level.

    None reads LOG_LEVEL from the environment. Unknown names fall back to INFO.
    """
    if isinstance(level, int):
        return level
    name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    return getattr(logging, name, logging.INFO)


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Logger for standalone entry points (scripts) and shared helpers.

    Inside the app the root logger is configured by backend.main; a handler
    is only attached here when nothing else has configured logging yet.

    Usage:
        >>> from backend.utils.logging import get_logger
        >>> logger = get_logger(__name__)
    """
    logger = logging.getLogger(name)
    logger.setLevel(resolve_log_level(level))

    if not logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)

    return logger
