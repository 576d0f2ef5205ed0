"""Package-wide logger setup for sngraph.

Generation, file I/O, path queries and flow export report progress through
loggers named after their modules, all children of ``sngraph``. Only the
``sngraph`` logger has a handler; the CLI adjusts its level from the
``--verbose``/``--quiet`` flags.
"""

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "sngraph"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_ROOT_LOGGER_CONFIGURED = False


def setup_root_logger(
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Install the output handler on the ``sngraph`` logger once.

    Later calls do nothing until ``reset_logging`` clears the setup.

    Args:
        level: Initial level of the ``sngraph`` logger.
        format_string: Record format; ``DEFAULT_FORMAT`` when omitted.
        handler: Destination for records; a stdout stream when omitted.
    """
    global _ROOT_LOGGER_CONFIGURED

    if _ROOT_LOGGER_CONFIGURED:
        return

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(level)
    package_logger.handlers.clear()

    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    package_logger.addHandler(handler)

    # Records still reach the Python root logger (pytest caplog)
    package_logger.propagate = True

    _ROOT_LOGGER_CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Logger for a module of the package, e.g. ``get_logger(__name__)``.

    The returned logger has no level of its own, so the ``sngraph`` level
    decides what is emitted.
    """
    setup_root_logger()
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: int) -> None:
    """Apply ``level`` to the ``sngraph`` logger and every handler on it."""
    setup_root_logger()

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(level)
    for handler in package_logger.handlers:
        handler.setLevel(level)


def level_from_flags(verbose: bool = False, quiet: bool = False) -> int:
    """Level for the CLI verbosity flags; ``verbose`` takes precedence."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def enable_debug_logging() -> None:
    """Show per-attempt and per-query DEBUG records."""
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    """Return to INFO, the default level."""
    set_global_log_level(logging.INFO)


def reset_logging() -> None:
    """Remove the ``sngraph`` handler so the next setup starts fresh."""
    global _ROOT_LOGGER_CONFIGURED
    _ROOT_LOGGER_CONFIGURED = False

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


setup_root_logger()
