"""
Logging configuration for spotify-private-api.

This module sets up the logging system used by the command-line interface:
    - Console: compact, colored messages (INFO and above, DEBUG with --verbose)
    - log_full_{timestamp}.log: Complete log of all events (DEBUG and above)
    - log_errors_{timestamp}.log: Only ERROR and CRITICAL level messages

File outputs are only created when a log directory is configured.
Library modules never configure logging themselves; they only obtain
a logger with get_logger(__name__).

Usage:
    from spotify_private_api.core.logger import setup_logging, get_logger

    setup_logging(log_dir)  # Call once at startup
    logger = get_logger(__name__)  # Module-level, in every module that logs

    logger.info("Fetching root list")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO


LOG_FULL_PREFIX = "log_full"
LOG_ERRORS_PREFIX = "log_errors"

# File handlers write one timestamped line per record
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Handlers installed by setup_logging() carry this attribute so that
# shutdown_logging() leaves foreign handlers (e.g. pytest's) alone.
_OWNED_MARKER = "_spotify_private_api_handler"


class Colors:
    """ANSI escape sequences used by the console formatter."""
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    BOLD = "\033[1m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Console formatter printing the level name in color, then the message.

    Colors:
        - DEBUG: Blue
        - INFO: Green
        - WARNING: Yellow
        - ERROR: Red
        - CRITICAL: Bold Red
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.BLUE,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        colored_levelname = f"{color}{record.levelname}{Colors.RESET}"
        message = f"{colored_levelname}: {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


class ErrorOnlyFilter(logging.Filter):
    """
    Pass ERROR and CRITICAL records only.

    Attached to the log_errors file handler.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def setup_logging(
    log_dir: Path | None = None,
    verbose: bool = False,
    stream: TextIO | None = None
) -> None:
    """
    Configure the logging system for the command-line interface.

    This function should be called ONCE at startup, after the configuration
    is loaded but before any network calls are made. Calling it again
    replaces the handlers installed by the previous call.

    Args:
        log_dir: Directory where log files will be created, or None to log
                 to the console only. Created if it doesn't exist.
        verbose: If True, the console shows DEBUG messages too.
        stream: Console stream. Defaults to sys.stderr.

    Behavior:
        1. Remove handlers installed by a previous call
        2. Configure the package logger level to DEBUG
        3. Add a colored console handler (INFO, or DEBUG when verbose)
        4. If log_dir is given, add a timestamped full log (DEBUG) and
           a timestamped errors log (ERROR and above via ErrorOnlyFilter)

    Thread Safety:
        This function is NOT thread-safe. Call it from the main thread.
    """
    shutdown_logging()

    package_logger = logging.getLogger("spotify_private_api")
    package_logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(ColoredConsoleFormatter())
    _install(package_logger, console_handler)

    if log_dir is None:
        return

    log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    full_handler = logging.FileHandler(
        log_dir / f"{LOG_FULL_PREFIX}_{timestamp}.log", mode="w", encoding="utf-8"
    )
    full_handler.setLevel(logging.DEBUG)
    full_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    _install(package_logger, full_handler)

    error_handler = logging.FileHandler(
        log_dir / f"{LOG_ERRORS_PREFIX}_{timestamp}.log", mode="w", encoding="utf-8"
    )
    error_handler.setLevel(logging.DEBUG)  # ErrorOnlyFilter decides
    error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    error_handler.addFilter(ErrorOnlyFilter())
    _install(package_logger, error_handler)


def _install(logger: logging.Logger, handler: logging.Handler) -> None:
    setattr(handler, _OWNED_MARKER, True)
    logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """
    Return the logger for a module of this package.

    Args:
        name: Usually __name__ of the calling module.
              This creates a hierarchy like 'spotify_private_api.folders.request'.

    Returns:
        logging.Logger: A logger that inherits the handlers set up by setup_logging().
    """
    return logging.getLogger(name)


def shutdown_logging() -> None:
    """
    Flush, close and remove the handlers installed by setup_logging().

    Safe to call multiple times, and before setup_logging() was ever called.
    """
    package_logger = logging.getLogger("spotify_private_api")
    for handler in list(package_logger.handlers):
        if getattr(handler, _OWNED_MARKER, False):
            handler.flush()
            handler.close()
            package_logger.removeHandler(handler)
