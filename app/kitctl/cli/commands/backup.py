"""Backup command implementation.

Writes snapshots of installed items (and editor settings) to the backup
directory.
"""

import json
from typing import Annotated

import typer

from kitctl.cli.display import print_backup_report
from kitctl.cli.types import SourceChoice, get_inventory
from kitctl.errors import ConfigurationError
from kitctl.models.sources import SourceId
from kitctl.utils.formatting import err_console, print_error, print_success, print_warning

app = typer.Typer(
    help="Back up installed packages, extensions and editor settings.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def backup_sources(
    ctx: typer.Context,
    sources: Annotated[
        list[SourceChoice] | None,
        typer.Option(
            "--source",
            "-s",
            help="Source to back up. Repeat for several. Default: every detected source.",
            case_sensitive=False,
        ),
    ] = None,
    only: Annotated[
        list[str] | None,
        typer.Option(
            "--only",
            "-i",
            help="Only write items with this identity. Repeat for several.",
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
    """Back up one or more sources in parallel.

    Each source is listed once and its snapshot replaces the previous one.
    A source that fails is reported and the others still complete.

    Examples:
        kitctl backup                         # Every detected source
        kitctl backup -s apt -s flatpak       # Selected sources
        kitctl backup -s scoop --only git     # Only some items
    """
    if ctx.invoked_subcommand is not None:
        return

    inventory = get_inventory()

    targets: list[SourceId]
    if sources:
        targets = [choice.to_source_id() for choice in sources]
    else:
        targets = [source for source, ok in inventory.detect_available_sources().items() if ok]
        if not targets:
            print_error("No package managers or editors were detected on this system.")
            raise typer.Exit(code=1)

    try:
        with err_console.status(f"Backing up {len(targets)} source(s)...", spinner="dots"):
            report = inventory.backup(targets, identifiers=only)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if json_output:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print_backup_report(report)

    if not report.all_succeeded:
        if not json_output:
            print_warning(f"{len(report.failed)} source(s) failed. Run with --verbose for details.")
        raise typer.Exit(code=1)

    if not json_output:
        print_success(f"Backed up {len(report.succeeded_ids)} source(s).")
