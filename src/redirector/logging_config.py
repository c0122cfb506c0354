"""Logging setup for the redirector package and its CLI."""

import logging
import sys
from typing import Optional, TextIO

LOGGER_NAME = "redirector"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def level_for(verbose: bool = False, quiet: bool = False) -> str:
    """Log level name for the CLI verbosity flags (quiet wins over verbose)."""
    if quiet:
        return "ERROR"
    if verbose:
        return "DEBUG"
    return "WARNING"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
    force: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure the ``redirector`` logger.

    Hop decisions are logged at DEBUG and refused redirects at WARNING,
    so ``level`` picks how much of a chain is traced. Records go to
    ``stream`` (stderr by default) and, if given, to ``log_file``.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for logging output
        format_string: Optional custom format string for log messages
        force: If True, reconfigure even if handlers exist
        stream: Stream for console output

    Returns:
        Configured logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)

    # Only clear and reconfigure if forced or no handlers exist
    if force or not logger.handlers:
        logger.handlers.clear()

        handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
        if log_file:
            handlers.append(logging.FileHandler(log_file))

        for handler in handlers:
            handler.setLevel(numeric_level)
            handler.setFormatter(formatter)
            logger.addHandler(handler)

    # Prevent propagation to root logger to avoid duplicate logs
    logger.propagate = False

    return logger
