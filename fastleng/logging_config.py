"""
fastleng Logging Configuration

Provides consistent logging setup for the command line tool and the loaders.

Usage:
    from fastleng.logging_config import setup_logging, get_logger

    # In main script
    setup_logging(verbose=args.verbose, quiet=args.quiet)
    logger = get_logger(__name__)

    logger.info("Loading file...")
    logger.warning("Detected aligned reads...")
"""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

# Default log directory
LOG_DIR = Path.home() / ".fastleng" / "logs"

# Log format strings
CONSOLE_FORMAT = "%(levelname)s: %(message)s"
CONSOLE_FORMAT_VERBOSE = "%(asctime)s %(name)s %(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"

ROOT_LOGGER_NAME = "fastleng"


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    debug: bool = False,
    log_file: Optional[Path] = None,
    name: str = ROOT_LOGGER_NAME
) -> logging.Logger:
    """
    Configure logging for fastleng.

    Args:
        verbose: Show INFO and above on console
        quiet: Only show WARNING and above
        debug: Show DEBUG and above (overrides verbose)
        log_file: Optional file to write logs to
        name: Logger name (default: "fastleng")

    Returns:
        Configured package logger
    """
    if debug:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)  # Capture all, filter at handler level

    # Close and drop handlers from a previous call
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)

    if debug or verbose:
        console_formatter = logging.Formatter(CONSOLE_FORMAT_VERBOSE, datefmt="%H:%M:%S")
    else:
        console_formatter = logging.Formatter(CONSOLE_FORMAT)

    console.setFormatter(console_formatter)
    logger.addHandler(console)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)  # Always capture everything to file
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    if os.environ.get("FASTLENG_LOG_TO_FILE"):
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        daily_log = LOG_DIR / f"fastleng-{datetime.now().strftime('%Y%m%d')}.log"

        daily_handler = logging.FileHandler(daily_log)
        daily_handler.setLevel(logging.DEBUG)
        daily_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(daily_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance under the fastleng namespace
    """
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def add_logging_args(parser) -> None:
    """
    Add standard logging arguments to an argument parser.

    Args:
        parser: argparse.ArgumentParser instance
    """
    log_group = parser.add_argument_group("logging")
    verbosity = log_group.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show progress messages"
    )
    verbosity.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Show only warnings and errors"
    )
    verbosity.add_argument(
        "--debug",
        action="store_true",
        help="Show debug output"
    )
    log_group.add_argument(
        "--log-file",
        type=Path,
        help="Write logs to file"
    )
