"""Status command implementation.

Shows when each source and config app was last backed up.
"""

import json
from typing import Annotated

import typer
from rich.table import Table

from kitctl.cli.types import get_inventory
from kitctl.errors import ConfigurationError
from kitctl.models.sources import config_apps_for_platform
from kitctl.utils.formatting import console, print_error

app = typer.Typer(
    help="Show when each source was last backed up.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def backup_status(
    ctx: typer.Context,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON for scripting.",
        ),
    ] = False,
) -> None:
    """List the last backup time of every source and config app on this platform."""
    if ctx.invoked_subcommand is not None:
        return

    inventory = get_inventory()
    try:
        metadata = inventory.backup_metadata()
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if json_output:
        print(json.dumps({s.value: when.isoformat() for s, when in metadata.items()}, indent=2))
        return

    table = Table(
        title=f"Backups in {inventory.store.root}",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Source", no_wrap=True)
    table.add_column("Last backup")

    targets = [
        *inventory.registry.platform_sources(),
        *config_apps_for_platform(inventory.platform),
    ]
    for target in targets:
        when = metadata.get(target)
        label = when.strftime("%Y-%m-%d %H:%M") if when else "[muted]never[/muted]"
        table.add_row(target.label, label)

    console.print(table)
