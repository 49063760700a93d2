"""Logging setup for the CLI."""

import logging

from rich.logging import RichHandler

from dbdoc.cli.common.output import console


def configure_logging(verbose: bool = False) -> None:
    """Send dbdoc log records to stderr through rich (WARNING, or INFO when verbose)."""
    handler = RichHandler(console=console, show_path=False, rich_tracebacks=False)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("dbdoc")
    logger.handlers[:] = [handler]
    logger.setLevel(logging.INFO if verbose else logging.WARNING)
    logger.propagate = False
