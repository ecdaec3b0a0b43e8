"""Config commands.

Show and change the persistent kitctl settings stored in
~/.config/kitctl/config.toml.
"""

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from kitctl.cli.types import load_config_or_exit
from kitctl.core.config import AppConfig, save_config
from kitctl.core.paths import get_config_path
from kitctl.errors import ConfigurationError
from kitctl.utils.formatting import console, print_error, print_success

app = typer.Typer(
    help="Show or change kitctl settings.",
    no_args_is_help=True,
)


@app.command()
def show(
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON for scripting.",
        ),
    ] = False,
) -> None:
    """Show the current settings."""
    config = load_config_or_exit()

    if json_output:
        print(json.dumps(config.model_dump(mode="json"), indent=2))
        return

    table = Table(
        title=str(get_config_path()),
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Setting", no_wrap=True)
    table.add_column("Value")

    backup_dir = "[muted]not set[/muted]"
    if config.backup_directory is not None:
        backup_dir = str(config.backup_directory)
    table.add_row("backup_directory", backup_dir)
    table.add_row("elevation_command", config.elevation_command)
    table.add_row("name_workers", str(config.name_workers))
    table.add_row("backup_workers", str(config.backup_workers))
    console.print(table)


@app.command("set-backup-dir")
def set_backup_dir(
    path: Annotated[
        Path,
        typer.Argument(help="Directory that holds the backup snapshots."),
    ],
    create: Annotated[
        bool,
        typer.Option(
            "--create/--no-create",
            help="Create the directory if it does not exist.",
        ),
    ] = True,
) -> None:
    """Choose the backup directory."""
    config = load_config_or_exit()
    target = path.expanduser().resolve()

    if target.exists() and not target.is_dir():
        print_error(f"Not a directory: {target}")
        raise typer.Exit(code=1)
    if not target.exists():
        if not create:
            print_error(f"Directory does not exist: {target}")
            raise typer.Exit(code=1)
        try:
            target.mkdir(parents=True)
        except OSError as e:
            print_error(f"Failed to create {target}: {e}")
            raise typer.Exit(code=1) from e

    _save(config.model_copy(update={"backup_directory": target}))
    print_success(f"Backup directory set to {target}")


@app.command("set-elevation")
def set_elevation(
    command: Annotated[
        str,
        typer.Argument(help="Command prefix for privileged installs, e.g. sudo or doas."),
    ],
) -> None:
    """Choose the command used to elevate package installs."""
    command = command.strip()
    if not command:
        print_error("Elevation command cannot be empty.")
        raise typer.Exit(code=1)

    config = load_config_or_exit()
    _save(config.model_copy(update={"elevation_command": command}))
    print_success(f"Elevation command set to '{command}'")


def _save(config: AppConfig) -> None:
    try:
        save_config(config)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
