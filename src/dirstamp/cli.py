"""Command-line front door for dirstamp.

Sets each directory's mtime to match its newest immediate child. Runs as a
dry run unless ``--confirm`` is given.

Example:
    $ dirstamp ~/photos
    $ dirstamp ~/photos --confirm --show-dates
    $ dirstamp --config dirstamp.yaml --no-follow-symlinks .
"""

import logging
from pathlib import Path

import typer

from dirstamp.cli_utils import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    EXIT_PATH_ERROR,
    _error,
    _info,
    _setup_logging,
    _success,
    console,
)
from dirstamp.core.build_info import get_build_info
from dirstamp.core.config import SettingsFile, StampConfig, load_settings
from dirstamp.core.exceptions import ConfigError, RootPathError
from dirstamp.core.stamp import StampService, TimestampDecision
from dirstamp.core.stamp.formatter import format_change, format_summary

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="dirstamp",
    help="Set each directory's mtime to match its newest immediate child.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(get_build_info().describe())
        raise typer.Exit()


@app.command()
def main(
    path: Path | None = typer.Argument(
        None,
        help="Root directory to process (default: current directory)",
        show_default=False,
    ),
    confirm: bool = typer.Option(
        False,
        "--confirm",
        "-C",
        help="Apply changes (default is dry run)",
    ),
    show_dates: bool = typer.Option(
        False,
        "--show-dates",
        "-D",
        help="Show from/to timestamps and day delta for each change",
    ),
    follow_symlinks: bool | None = typer.Option(
        None,
        "--follow-symlinks/--no-follow-symlinks",
        help="Descend into symbolically linked directories (default: follow)",
        show_default=False,
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML settings file with show_dates / follow_symlinks defaults",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show errors in logs"),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version information",
    ),
) -> None:
    """Set each directory's mtime to its newest immediate child.

    The newest file wins; directories without files take the newest
    subdirectory instead. Empty directories are never touched. Directories
    are processed deepest first so freshness reaches the root.
    """
    _setup_logging(verbose=verbose, quiet=quiet)

    settings: SettingsFile | None = None
    if config is not None:
        try:
            settings = load_settings(config)
        except ConfigError as e:
            _error(str(e))
            raise typer.Exit(code=EXIT_CONFIG_ERROR) from None

    run_config = StampConfig.from_sources(
        settings,
        confirm=confirm,
        show_dates=True if show_dates else None,
        follow_symlinks=follow_symlinks,
    )
    root = path if path is not None else Path.cwd()

    def report(decision: TimestampDecision) -> None:
        _info(format_change(decision, show_dates=run_config.show_dates))

    service = StampService(run_config, on_change=report)
    try:
        summary = service.run(root)
    except RootPathError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_PATH_ERROR) from None
    except Exception as e:
        logger.exception("Unexpected error while processing %s", root)
        _error(f"Unexpected error: {e}")
        raise typer.Exit(code=EXIT_ERROR) from None

    message = format_summary(summary)
    if summary.updated and summary.dry_run:
        console.print()
        _info(message)
    elif summary.updated:
        _success(message)
    else:
        _info(message)
