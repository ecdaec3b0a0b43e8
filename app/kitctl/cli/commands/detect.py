"""Detect command implementation.

Reports which package managers and host apps are usable on this machine.
"""

import json
from typing import Annotated

import typer
from rich.table import Table

from kitctl.cli.types import get_inventory
from kitctl.models.sources import HostAppId
from kitctl.utils.formatting import console

app = typer.Typer(
    help="Detect available package managers and editors.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def detect_sources(
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
    """Show which sources are available on this system.

    Only sources meaningful on the current operating system are listed.

    Examples:
        kitctl detect           # Table of sources
        kitctl detect --json    # {"apt": true, "snap": false, ...}
    """
    if ctx.invoked_subcommand is not None:
        return

    available = get_inventory().detect_available_sources()

    if json_output:
        print(json.dumps({source.value: ok for source, ok in available.items()}, indent=2))
        return

    table = Table(
        title="Sources",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Source", no_wrap=True)
    table.add_column("Kind", style="muted")
    table.add_column("Status", justify="center")

    for source, ok in available.items():
        kind = "editor" if isinstance(source, HostAppId) else "package manager"
        status = "[success]available[/success]" if ok else "[muted]not found[/muted]"
        table.add_row(f"{source.label} [muted]({source.value})[/muted]", kind, status)

    console.print(table)
