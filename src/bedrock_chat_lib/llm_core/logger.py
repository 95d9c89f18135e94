"""
Logging for the Bedrock chat library.

All modules log below the ``bedrock_chat_lib`` logger, which only carries a
NullHandler until the host application opts in with :func:`setup_logging`.
"""

import logging
import os
import sys
from typing import Optional, Union

LIBRARY_LOGGER = "bedrock_chat_lib"
LOG_LEVEL_ENV = "BEDROCK_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Returns the library logger, or a child of it.

    ``__name__`` of a library module is used as-is; any other name is nested
    below the library logger.
    """
    if not name:
        return logging.getLogger(LIBRARY_LOGGER)
    if name == LIBRARY_LOGGER or name.startswith(f"{LIBRARY_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LIBRARY_LOGGER}.{name}")


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV) or logging.INFO
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        return resolved
    return level


def setup_logging(level: Union[int, str, None] = None, format_str: str = DEFAULT_FORMAT) -> logging.Handler:
    """Sends library log records to stdout.

    Meant for applications and scripts; the library never calls it itself.
    Calling it again keeps the existing handler and only updates the level.

    Args:
        level: Level as int or name. Defaults to ``$BEDROCK_LOG_LEVEL``, then INFO.
        format_str: Format for the stdout handler.

    Returns:
        The handler records are written to.

    Raises:
        ValueError: If ``level`` names no known level.
    """
    logger = logging.getLogger(LIBRARY_LOGGER)
    logger.setLevel(_resolve_level(level))

    for handler in logger.handlers:
        if not isinstance(handler, logging.NullHandler):
            return handler

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_str))
    logger.addHandler(handler)
    return handler


logging.getLogger(LIBRARY_LOGGER).addHandler(logging.NullHandler())
