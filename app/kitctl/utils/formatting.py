"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from kitctl.core.theme import get_theme
from kitctl.models.merge import Provenance

if TYPE_CHECKING:
    from kitctl.models.merge import MergedItem

# Style name and status label per provenance
_PROVENANCE_DISPLAY: dict[Provenance, tuple[str, str]] = {
    Provenance.INSTALLED: ("installed", "installed"),
    Provenance.BACKUP_ONLY: ("backup_only", "backup only"),
    Provenance.BOTH: ("both", "installed, backed up"),
}


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def create_package_table(title: str = "Installed Packages") -> Table:
    """Create a pre-configured table for displaying records.

    Args:
        title: Table title.

    Returns:
        Rich Table with Package, Version and Name columns.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],  # Zebra striping for readability
    )
    table.add_column("Package", no_wrap=True, style="text")
    table.add_column("Version", style="muted")
    table.add_column("Name", style="info", overflow="ellipsis")
    return table


def create_merged_table(title: str) -> Table:
    """Create a pre-configured table for a reconciled view.

    Args:
        title: Table title.

    Returns:
        Rich Table with a provenance icon column.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("", width=2, justify="center")
    table.add_column("Name", no_wrap=True)
    table.add_column("Id", style="muted")
    table.add_column("Version", style="muted")
    table.add_column("Status")
    return table


def format_merged_row(item: MergedItem) -> tuple[str, str, str, str, str]:
    """Format a merged item as a table row with proper styling.

    Installed items get a filled circle, backup-only items an empty one.

    Args:
        item: The merged item to format.

    Returns:
        Tuple of (icon, name, id, version, status) with Rich markup.
    """
    style, status = _PROVENANCE_DISPLAY[item.provenance]
    icon = "\u25cf" if item.is_installed else "\u25cb"  # Filled or empty circle

    return (
        f"[{style}]{icon}[/]",
        f"[{style}]{escape(item.display_name)}[/]",
        escape(item.id),
        item.version or "-",
        f"[{style}]{status}[/]",
    )


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
