"""
Logging setup for the command-line scripts.

Package modules log through logging.getLogger(__name__); this attaches a
single stderr handler to the package logger so reports printed on stdout
(extraction reports, JSON output) stay machine-readable.
"""

import logging
import sys

LOGGER_NAME = "beepbeepcheap"
LOG_FORMAT = "%(levelname)-8s %(name)s: %(message)s"

# Chatty HTTP/browser libraries, kept at WARNING unless --verbose
NOISY_LOGGERS = ("urllib3", "asyncio")


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure the beepbeepcheap logger.

    Safe to call more than once: any previously attached handler is replaced.

    Args:
        verbose: DEBUG level, including cascade strategy decisions
        quiet: WARNING level (render failures, provider errors only)
    """
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(level)
    package_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)
