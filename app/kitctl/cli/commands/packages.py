"""List command implementation.

Lists the items currently installed through one source.
"""

import json
from typing import Annotated

import typer

from kitctl.cli.display import create_progress, create_records_table
from kitctl.cli.types import SourceChoice, get_inventory
from kitctl.utils.formatting import console, print_info, print_warning

app = typer.Typer(
    help="List installed packages or extensions of one source.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def list_packages(
    ctx: typer.Context,
    source: Annotated[
        SourceChoice,
        typer.Option(
            "--source",
            "-s",
            help="Package manager or editor to list.",
            case_sensitive=False,
        ),
    ],
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output records as JSON, using the manager's field names.",
        ),
    ] = False,
) -> None:
    """List installed items of one source.

    A source that is missing or fails to list shows up as empty; run with
    --verbose to see why.

    Examples:
        kitctl list --source apt
        kitctl list -s vscode --json
    """
    if ctx.invoked_subcommand is not None:
        return

    source_id = source.to_source_id()

    with create_progress(disable=json_output) as progress:
        task = progress.add_task("Resolving names", total=None, visible=False)

        def on_name_progress(done: int, total: int, package_id: str) -> None:
            progress.update(task, completed=done, total=total, visible=True)

        inventory = get_inventory(on_name_progress=on_name_progress)
        if not inventory.registry.get(source_id).is_available():
            print_warning(f"{source_id.label} is not available on this system.")
        records = inventory.list_installed(source_id)

    if json_output:
        print(json.dumps([record.to_snapshot() for record in records], indent=2))
        return

    if not records:
        print_info(f"No installed items found for {source_id.label}.")
        return

    console.print(create_records_table(records, f"Installed ({source_id.label})"))
    console.print(f"\n[muted]{len(records)} item(s)[/muted]")
