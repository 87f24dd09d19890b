"""Shared CLI helpers: exit codes, consoles, message styling and logging setup."""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

# Exit codes
EXIT_ERROR = 1
EXIT_PATH_ERROR = 2  # Same code Click uses for unknown options
EXIT_CONFIG_ERROR = 3

# Reports go to stdout, diagnostics to stderr. soft_wrap keeps long paths on one line.
console = Console(soft_wrap=True, highlight=False)
err_console = Console(stderr=True, soft_wrap=True, highlight=False)

PACKAGE_LOGGER = "dirstamp"


def _error(message: str) -> None:
    err_console.print(f"[red]Error:[/red] {escape(message)}")


def _info(message: str) -> None:
    console.print(escape(message))


def _success(message: str) -> None:
    console.print(f"[green]{escape(message)}[/green]")


def _setup_logging(verbose: bool, quiet: bool) -> None:
    """Attach a Rich handler on stderr to the package logger.

    Args:
        verbose: Show DEBUG messages.
        quiet: Show only ERROR messages. Ignored when verbose is set.

    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)

    handler = RichHandler(
        console=err_console,
        show_time=False,
        show_path=verbose,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
