"""Shared Rich display functions for records, outcomes and reports.

Provides reusable table builders and summary printers used by the list,
diff, backup and restore commands.
"""

from collections.abc import Sequence

from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from kitctl.core.reconcile import record_version
from kitctl.models.action import BackupReport, InstallOutcome
from kitctl.models.merge import MergedItem
from kitctl.models.package import PackageRecord
from kitctl.utils.formatting import (
    console,
    create_merged_table,
    create_package_table,
    err_console,
    format_merged_row,
    print_success,
    print_warning,
)


def create_records_table(records: Sequence[PackageRecord], title: str) -> Table:
    """Create a Rich table listing installed records.

    Args:
        records: Records to display.
        title: Table title.

    Returns:
        Rich Table with one row per record.
    """
    table = create_package_table(title)
    for record in records:
        version = record_version(record) or "-"
        name = record.display_name if record.display_name != record.identity else ""
        table.add_row(escape(record.identity), escape(version), escape(name))
    return table


def create_reconciled_table(items: Sequence[MergedItem], title: str) -> Table:
    """Create a Rich table for a reconciled view.

    Args:
        items: Merged items, already sorted.
        title: Table title.

    Returns:
        Rich Table with one styled row per item.
    """
    table = create_merged_table(title)
    for item in items:
        table.add_row(*format_merged_row(item))
    return table


def print_reconcile_summary(items: Sequence[MergedItem]) -> None:
    """Print counts of installed and restorable items."""
    installed = sum(1 for item in items if item.is_installed)
    missing = len(items) - installed
    console.print(
        f"\nSummary: [installed]{installed} installed[/installed], "
        f"[backup_only]{missing} only in backup[/backup_only]"
    )


def create_outcomes_table(outcomes: Sequence[InstallOutcome]) -> Table:
    """Create a Rich table displaying install outcomes.

    Successful installs show "OK"; failed ones show "FAIL" with the error.

    Args:
        outcomes: Outcomes in install order.

    Returns:
        Rich Table configured for results display.
    """
    table = Table(
        title="Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=6, justify="center")
    table.add_column("Item", no_wrap=True)
    table.add_column("Command", style="muted")
    table.add_column("Message")

    for outcome in outcomes:
        if outcome.success:
            status = "[success]OK[/success]"
            message = ""
        else:
            status = "[error]FAIL[/error]"
            message = f"[error]{outcome.error or f'exit {outcome.exit_code}'}[/error]"
        table.add_row(status, outcome.identifier, outcome.command.line, message)

    return table


def print_outcomes_summary(outcomes: Sequence[InstallOutcome]) -> None:
    """Print a one-line summary of install outcomes."""
    failed = sum(1 for outcome in outcomes if outcome.failed)
    succeeded = len(outcomes) - failed
    if failed:
        print_warning(f"{succeeded} installed, {failed} failed.")
    else:
        print_success(f"{succeeded} installed.")


def print_backup_report(report: BackupReport) -> None:
    """Print written files and per-source status of a backup."""
    for path in report.written_paths:
        console.print(f"  [muted]wrote[/muted] {path}")

    for source in report.succeeded_ids:
        console.print(f"[success]✓[/success] {source.label}")
    for source, message in report.failed.items():
        console.print(f"[error]✗[/error] {source.label}: [muted]{message}[/muted]")


def create_progress(disable: bool = False) -> Progress:
    """Create a transient progress display on stderr.

    Args:
        disable: Suppress the display, e.g. for JSON output.

    Returns:
        Rich Progress to be used as a context manager.
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[info]{task.description}"),
        BarColumn(bar_width=None),
        MofNCompleteColumn(),
        console=err_console,
        transient=True,
        disable=disable,
    )
