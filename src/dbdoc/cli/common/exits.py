"""Exit handling utilities for the CLI."""

from typing import NoReturn

import typer

from dbdoc.cli.common.output import out

EXIT_CONFIG = 1
EXIT_DATABASE = 2
EXIT_OUTPUT = 3


def die(msg: str, code: int = EXIT_CONFIG) -> NoReturn:
    """Exit with an error message and optional exit code."""
    out.error(msg)
    raise typer.Exit(code)


def exit_from_exc(exc: Exception, *, message: str, code: int = EXIT_CONFIG) -> NoReturn:
    """Print an error message and exit with the given code, chaining the cause."""
    out.error(message)
    raise typer.Exit(code) from exc
