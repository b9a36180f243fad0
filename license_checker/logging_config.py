"""Logging setup for license-checker.

Library modules log through ``logging.getLogger(__name__)``; the CLI calls
:func:`configure_logging` once to route the ``license_checker`` logger through
Rich on stderr so stdout stays clean for piped JSON output.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "license_checker"


def configure_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Configure the package logger.

    Args:
        verbose: Enable debug-level output.
        quiet: Only show errors.

    Returns:
        The configured package logger.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=verbose,
        rich_tracebacks=verbose,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False

    return logger
