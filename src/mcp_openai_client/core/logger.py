"""Logging utilities for the MCP OpenAI client."""

import logging
import sys

_LOGGER_NAME = "mcp_openai_client"


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance for the client.

    Args:
        name: Optional sub-logger name. If None, returns the root client logger.

    Returns:
        The requested logger.
    """
    if name:
        if name.startswith(f"{_LOGGER_NAME}.") or name == _LOGGER_NAME:
            return logging.getLogger(name)
        return logging.getLogger(f"{_LOGGER_NAME}.{name}")
    return logging.getLogger(_LOGGER_NAME)


def setup_logging(
    level: int | str = logging.WARNING, format_str: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
) -> None:
    """Setup default logging configuration for the client.

    Logs go to stderr so they never interleave with answers printed on stdout.
    Calling this more than once only adjusts the level.

    Args:
        level: Logging level, either numeric or a name such as ``"DEBUG"``.
        format_str: Log format string.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)

    # Avoid adding multiple handlers if called multiple times
    if any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(format_str))
    logger.addHandler(handler)


# Set default NullHandler to avoid "No handler found" warnings
logging.getLogger(_LOGGER_NAME).addHandler(logging.NullHandler())
