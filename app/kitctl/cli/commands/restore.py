"""Restore command implementation.

Re-installs items of one source, either directly or through a script.
"""

from pathlib import Path
from typing import Annotated

import typer

from kitctl.cli.display import (
    create_outcomes_table,
    create_progress,
    print_outcomes_summary,
)
from kitctl.cli.types import SourceChoice, get_inventory, parse_version_pins
from kitctl.errors import ConfigurationError
from kitctl.models.action import RestoreRequest
from kitctl.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Re-install packages or extensions from a backup.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def restore_items(
    ctx: typer.Context,
    source: Annotated[
        SourceChoice,
        typer.Option(
            "--source",
            "-s",
            help="Package manager or editor that installs the items.",
            case_sensitive=False,
        ),
    ],
    ids: Annotated[
        list[str] | None,
        typer.Option(
            "--id",
            "-i",
            help="Item to install. Repeat for several; installed in the given order.",
        ),
    ] = None,
    all_missing: Annotated[
        bool,
        typer.Option(
            "--all-missing",
            "-a",
            help="Install everything in the backup that is not installed.",
        ),
    ] = False,
    versions: Annotated[
        list[str] | None,
        typer.Option(
            "--version",
            help="Pin a version as ID=VERSION (where the manager supports it).",
        ),
    ] = None,
    wsl: Annotated[
        bool,
        typer.Option(
            "--wsl",
            help="Install editor extensions inside WSL (Windows only).",
        ),
    ] = False,
    preview: Annotated[
        bool,
        typer.Option(
            "--preview",
            "-p",
            help="Print the install script instead of running it.",
        ),
    ] = False,
    script: Annotated[
        bool,
        typer.Option(
            "--script",
            help="Write the install script to a file instead of running it.",
        ),
    ] = False,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Script path for --script (.sh or .ps1). Default: temp directory.",
        ),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompt.",
        ),
    ] = False,
) -> None:
    """Install items of one source.

    Items are installed one at a time in the order given. A failed install
    is reported and the remaining items are still attempted.

    Examples:
        kitctl restore -s apt -i curl -i git
        kitctl restore -s chocolatey -i jq --version jq=1.7
        kitctl restore -s vscode --all-missing --preview
        kitctl restore -s winget --all-missing --script -o install.ps1
    """
    if ctx.invoked_subcommand is not None:
        return

    if preview and script:
        print_error("--preview and --script cannot be combined.")
        raise typer.Exit(code=1)

    source_id = source.to_source_id()
    inventory = get_inventory()

    try:
        identifiers = list(ids or [])
        if all_missing:
            items = inventory.reconcile_wsl(source_id) if wsl else inventory.reconcile(source_id)
            identifiers.extend(
                item.id for item in items if not item.is_installed and item.id not in identifiers
            )

        if not identifiers:
            print_info("Nothing to restore.")
            return

        request = RestoreRequest(
            target=source_id,
            identifiers=tuple(identifiers),
            versions=parse_version_pins(versions),
        )

        if preview:
            console.print(
                inventory.restore_preview_script(request, wsl=wsl),
                markup=False,
                highlight=False,
                end="",
            )
            return

        if script:
            path = inventory.restore_write_script(request, output_path=output, wsl=wsl)
            print_success(f"Install script written to {path}")
            return

        print_info(f"{len(identifiers)} item(s) will be installed with {source_id.label}.")
        if not yes:
            confirm = typer.confirm("Proceed?", default=False)
            if not confirm:
                print_info("Aborted.")
                raise typer.Exit(code=0)

        with create_progress() as progress:
            task = progress.add_task("Installing", total=len(identifiers))

            def on_progress(done: int, total: int, outcome: object) -> None:
                progress.update(task, completed=done)

            outcomes = inventory.restore_execute(request, wsl=wsl, on_progress=on_progress)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    except OSError as e:
        print_error(f"Failed to write script: {e}")
        raise typer.Exit(code=1) from e

    console.print(create_outcomes_table(outcomes))
    print_outcomes_summary(outcomes)

    if any(outcome.failed for outcome in outcomes):
        raise typer.Exit(code=1)
