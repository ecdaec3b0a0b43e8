"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from kitctl import __version__
from kitctl.cli.commands import (
    backup,
    config,
    detect,
    diff,
    files,
    packages,
    restore,
    settings,
    status,
)
from kitctl.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="kitctl",
    help="Back up and restore installed software across package managers.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"kitctl version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool, quiet: bool) -> None:
    """Route log records through Rich on stderr."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose, markup=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """kitctl - back up and restore installed software.

    Snapshots what winget, scoop, apt, snap, flatpak and friends have
    installed, along with editor extensions and settings, and reinstalls
    it on another machine.
    """
    configure_logging(verbose, quiet)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# Register commands
app.add_typer(detect.app, name="detect")
app.add_typer(packages.app, name="list")
app.add_typer(diff.app, name="diff")
app.add_typer(backup.app, name="backup")
app.add_typer(restore.app, name="restore")
app.add_typer(settings.app, name="restore-settings")
app.add_typer(files.app, name="files")
app.add_typer(status.app, name="status")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
