"""Diff command implementation.

Reconciles what is installed now with the last backup of one source.
"""

import json
from typing import Annotated

import typer

from kitctl.cli.display import create_progress, create_reconciled_table, print_reconcile_summary
from kitctl.cli.types import SourceChoice, get_inventory
from kitctl.errors import ConfigurationError
from kitctl.utils.formatting import console, print_error, print_info

app = typer.Typer(
    help="Compare installed items with the last backup.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def diff_source(
    ctx: typer.Context,
    source: Annotated[
        SourceChoice,
        typer.Option(
            "--source",
            "-s",
            help="Package manager or editor to reconcile.",
            case_sensitive=False,
        ),
    ],
    wsl: Annotated[
        bool,
        typer.Option(
            "--wsl",
            help="Reconcile an editor's extensions inside WSL (Windows only).",
        ),
    ] = False,
    missing_only: Annotated[
        bool,
        typer.Option(
            "--missing-only",
            "-m",
            help="Only show items that are in the backup but not installed.",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON for scripting.",
        ),
    ] = False,
) -> None:
    """Show installed and backed-up items of one source side by side.

    Installed items come first. Items only found in the backup are the
    ones 'kitctl restore --all-missing' would install.

    Status:
      ● installed              Installed, not in the backup
      ● installed, backed up   Installed and in the backup
      ○ backup only            In the backup, not installed

    Examples:
        kitctl diff --source winget
        kitctl diff -s vscode --wsl
        kitctl diff -s apt --missing-only --json
    """
    if ctx.invoked_subcommand is not None:
        return

    source_id = source.to_source_id()

    try:
        with create_progress(disable=json_output) as progress:
            task = progress.add_task("Resolving names", total=None, visible=False)

            def on_name_progress(done: int, total: int, package_id: str) -> None:
                progress.update(task, completed=done, total=total, visible=True)

            inventory = get_inventory(on_name_progress=on_name_progress)
            if wsl:
                items = inventory.reconcile_wsl(source_id)
            else:
                items = inventory.reconcile(source_id)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if missing_only:
        items = [item for item in items if not item.is_installed]

    if json_output:
        print(json.dumps([item.to_dict() for item in items], indent=2))
        return

    if not items:
        print_info(f"Nothing to show for {source_id.label}.")
        return

    title = f"{source_id.label} (WSL)" if wsl else source_id.label
    console.print(create_reconciled_table(items, title))
    print_reconcile_summary(items)
