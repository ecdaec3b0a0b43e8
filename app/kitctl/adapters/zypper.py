"""Zypper package adapter implementation.

Parses the pipe-delimited table of ``zypper se -i -s``. The column order
differs between zypper releases, so columns are located by their header
titles rather than by position.
"""

import logging

from kitctl.adapters.base import Adapter, elevated, split_lines
from kitctl.errors import ParseError
from kitctl.models.action import InstallCommand
from kitctl.models.package import PackageRecord, YumItem
from kitctl.models.sources import ManagerId
from kitctl.utils.shell import CommandRunner

logger = logging.getLogger(__name__)

# Only real packages; patterns, patches and source packages are skipped
_PACKAGE_TYPE = "package"


class ZypperAdapter(Adapter):
    """Adapter for openSUSE/SLE packages managed by zypper."""

    def __init__(self, runner: CommandRunner | None = None, elevation: str | None = "sudo") -> None:
        super().__init__(runner)
        self._elevation = elevation

    @property
    def source(self) -> ManagerId:
        """Return Zypper as the source."""
        return ManagerId.ZYPPER

    def is_available(self) -> bool:
        """Check if zypper is available."""
        return self.runner.exists("zypper")

    def _collect(self) -> list[PackageRecord]:
        result = self._run_checked(["zypper", "se", "-i", "-s"])
        return parse_search_table(result.stdout)

    def build_install_command(self, identifier: str, version: str | None = None) -> InstallCommand:
        """Build ``<elevation> zypper install -y <name>``."""
        return elevated(self._elevation, ["zypper", "install", "-y", identifier])


def parse_search_table(output: str) -> list[PackageRecord]:
    """Parse the installed-package table printed by ``zypper se -i -s``.

    Args:
        output: Raw stdout of zypper.

    Returns:
        YumItem per installed package, in output order.

    Raises:
        ParseError: If a table is present but has no Name or Version column.
    """
    columns: dict[str, int] | None = None
    records: list[PackageRecord] = []

    for line in split_lines(output):
        if "|" not in line:
            # "Loading repository data..." and similar progress lines
            continue

        cells = [cell.strip() for cell in line.split("|")]

        if columns is None:
            columns = _locate_columns(cells)
            continue

        if _is_separator(line):
            continue

        record = _parse_row(cells, columns)
        if record is not None:
            records.append(record)

    return records


def _locate_columns(header: list[str]) -> dict[str, int]:
    """Map lowercased header titles to their cell index."""
    columns = {title.lower(): index for index, title in enumerate(header) if title}
    missing = [name for name in ("name", "version") if name not in columns]
    if missing:
        msg = f"zypper table header lacks column(s): {', '.join(missing)}"
        raise ParseError(msg)
    return columns


def _is_separator(line: str) -> bool:
    """Check for a ``---+----`` rule line."""
    return set(line.strip()) <= {"-", "+", "|", "="}


def _parse_row(cells: list[str], columns: dict[str, int]) -> YumItem | None:
    """Build a record from one table row, or None for rows to skip."""

    def cell(name: str) -> str | None:
        index = columns.get(name)
        if index is None or index >= len(cells):
            return None
        return cells[index] or None

    row_type = cell("type")
    if row_type is not None and row_type != _PACKAGE_TYPE:
        return None

    name = cell("name")
    full_version = cell("version")
    if name is None or full_version is None:
        logger.debug("Skipping incomplete zypper row: %r", cells)
        return None

    version, _, release = full_version.partition("-")
    return YumItem(
        name=name,
        version=version,
        release=release or None,
        architecture=cell("arch"),
    )
