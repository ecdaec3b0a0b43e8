"""Restore-settings command implementation.

Copies an editor's backed-up settings, keybindings and MCP config back
into place.
"""

from typing import Annotated

import typer

from kitctl.cli.types import HostChoice, get_inventory
from kitctl.errors import ConfigurationError
from kitctl.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Restore an editor's settings files from the backup.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def restore_settings(
    ctx: typer.Context,
    host: Annotated[
        HostChoice,
        typer.Option(
            "--host",
            help="Editor whose settings are restored.",
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
    """Overwrite an editor's settings with the backed-up copies.

    Files that were never backed up are left alone.

    Examples:
        kitctl restore-settings --host vscode
        kitctl restore-settings --host cursor -y
    """
    if ctx.invoked_subcommand is not None:
        return

    inventory = get_inventory()

    if not yes:
        confirm = typer.confirm(
            f"Overwrite the current {host.value} settings with the backup?",
            default=False,
        )
        if not confirm:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    try:
        written = inventory.restore_host_settings(host.value)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    except OSError as e:
        print_error(f"Failed to restore settings: {e}")
        raise typer.Exit(code=1) from e

    if not written:
        print_info(f"No backed-up settings found for {host.value}.")
        return

    for path in written:
        console.print(f"  [muted]restored[/muted] {path}")
    print_success(f"Restored {len(written)} file(s).")
