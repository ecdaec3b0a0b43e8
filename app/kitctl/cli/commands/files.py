"""Config file commands.

Back up and restore the plain configuration files of tools such as Git,
the shells and Windows Terminal.
"""

import json
from typing import Annotated

import typer
from rich.table import Table

from kitctl.cli.display import print_backup_report
from kitctl.cli.types import ConfigAppChoice, get_inventory
from kitctl.errors import ConfigurationError
from kitctl.models.sources import ConfigAppId
from kitctl.utils.formatting import (
    console,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Back up and restore application config files.",
    no_args_is_help=True,
)


@app.command()
def detect(
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON for scripting.",
        ),
    ] = False,
) -> None:
    """Show which config apps have files on this system."""
    inventory = get_inventory()
    available = inventory.detect_config_apps()

    if json_output:
        print(json.dumps({app.value: ok for app, ok in available.items()}, indent=2))
        return

    table = Table(
        title="Config apps",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("App", no_wrap=True)
    table.add_column("Status", justify="center")

    for config_app, ok in available.items():
        if inventory.platform not in config_app.platforms:
            status = "[muted]not on this OS[/muted]"
        elif ok:
            status = "[success]found[/success]"
        else:
            status = "[muted]no files[/muted]"
        table.add_row(f"{config_app.label} [muted]({config_app.value})[/muted]", status)

    console.print(table)


@app.command()
def backup(
    apps: Annotated[
        list[ConfigAppChoice] | None,
        typer.Option(
            "--app",
            "-a",
            help="Config app to back up. Repeat for several. Default: every app with files.",
            case_sensitive=False,
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output the report as JSON.",
        ),
    ] = False,
) -> None:
    """Copy config files into the backup directory.

    Examples:
        kitctl files backup                 # Every app with files here
        kitctl files backup -a git -a zsh   # Selected apps
    """
    inventory = get_inventory()

    targets: list[ConfigAppId]
    if apps:
        targets = [ConfigAppId(choice.value) for choice in apps]
    else:
        targets = [config_app for config_app, ok in inventory.detect_config_apps().items() if ok]
        if not targets:
            print_error("No config files were found on this system.")
            raise typer.Exit(code=1)

    try:
        with err_console.status(f"Copying files of {len(targets)} app(s)...", spinner="dots"):
            report = inventory.backup_config_apps(targets)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if json_output:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print_backup_report(report)

    if not report.all_succeeded:
        if not json_output:
            print_warning(f"{len(report.failed)} app(s) failed.")
        raise typer.Exit(code=1)

    if not json_output:
        print_success(f"Backed up {len(report.succeeded_ids)} app(s).")


@app.command()
def restore(
    config_app: Annotated[
        ConfigAppChoice,
        typer.Option(
            "--app",
            "-a",
            help="Config app whose files are restored.",
            case_sensitive=False,
        ),
    ],
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompt.",
        ),
    ] = False,
) -> None:
    """Overwrite a config app's files with the backed-up copies.

    Examples:
        kitctl files restore -a git
        kitctl files restore -a windows-terminal -y
    """
    inventory = get_inventory()

    if not yes:
        confirm = typer.confirm(
            f"Overwrite the current {config_app.value} config files with the backup?",
            default=False,
        )
        if not confirm:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    try:
        written = inventory.restore_config_app(config_app.value)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    except OSError as e:
        print_error(f"Failed to restore config files: {e}")
        raise typer.Exit(code=1) from e

    if not written:
        print_info(f"No backed-up files found for {config_app.value}.")
        return

    for path in written:
        console.print(f"  [muted]restored[/muted] {path}")
    print_success(f"Restored {len(written)} file(s).")
