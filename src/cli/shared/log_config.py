"""Loguru sink configuration for the CLI."""

import sys

from loguru import logger


def configure_logging(verbose: bool = False) -> None:
    """Route diagnostic logs to stderr.

    Human-facing progress goes through the rich console; loguru only
    carries diagnostics, so the default level is WARNING.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format="<dim>{time:HH:mm:ss}</dim> <level>{level: <8}</level> {message}",
    )
