"""Snap package adapter implementation.

Lists installed snaps using the snap CLI, leaving out runtime snaps.
"""

import logging
import re

from kitctl.adapters.base import Adapter, elevated, split_lines
from kitctl.models.action import InstallCommand
from kitctl.models.package import PackageRecord, SnapItem
from kitctl.models.sources import ManagerId
from kitctl.utils.shell import CommandRunner

logger = logging.getLogger(__name__)

# Notes values that indicate runtime/infrastructure snaps
_RUNTIME_NOTES: frozenset[str] = frozenset({"base", "snapd", "core"})

# Exact snap names that are always runtime infrastructure
_RUNTIME_NAMES: frozenset[str] = frozenset({"snapd", "bare"})

# Base snap names: core, core18, core20, ...
_CORE_SNAP = re.compile(r"^core\d*$")


class SnapAdapter(Adapter):
    """Adapter for Snap packages.

    Uses ``snap list`` to enumerate installed snaps. Runtime and
    infrastructure snaps (cores, bases, snapd) are filtered out since a
    restore pulls them in as dependencies.
    """

    def __init__(self, runner: CommandRunner | None = None, elevation: str | None = "sudo") -> None:
        super().__init__(runner)
        self._elevation = elevation

    @property
    def source(self) -> ManagerId:
        """Return Snap as the source."""
        return ManagerId.SNAP

    def is_available(self) -> bool:
        """Check if snap CLI is available."""
        return self.runner.exists("snap")

    def _collect(self) -> list[PackageRecord]:
        result = self._run_checked(["snap", "list"])
        return parse_snap_list(result.stdout)

    def build_install_command(self, identifier: str, version: str | None = None) -> InstallCommand:
        """Build ``<elevation> snap install <name>``."""
        return elevated(self._elevation, ["snap", "install", identifier])


def parse_snap_list(output: str) -> list[PackageRecord]:
    """Parse ``snap list`` output.

    Args:
        output: Raw stdout; the first line is the column header.

    Returns:
        SnapItem for each user-facing snap.
    """
    records: list[PackageRecord] = []
    # Skip header line ("Name  Version  Rev  Tracking  Publisher  Notes")
    for line in split_lines(output)[1:]:
        record = _parse_snap_line(line)
        if record is not None:
            records.append(record)
    return records


def _parse_snap_line(line: str) -> SnapItem | None:
    """Parse a single line of snap list output.

    Args:
        line: Whitespace-separated line from snap list.

    Returns:
        SnapItem if the snap is a user-facing app, None if it is a
        runtime snap or the line is malformed.
    """
    parts = line.split()
    if len(parts) < 3:
        logger.debug("Skipping malformed snap line (parts=%d): %r", len(parts), line[:100])
        return None

    name = parts[0]
    notes = parts[5] if len(parts) > 5 else "-"

    if _is_runtime_snap(name, notes):
        return None

    return SnapItem(
        name=name,
        version=parts[1],
        revision=parts[2],
        tracking=parts[3] if len(parts) > 3 else None,
    )


def _is_runtime_snap(name: str, notes: str) -> bool:
    """Check whether a snap is a runtime/infrastructure snap.

    Runtime snaps include cores, bases, snapd itself, the bare snap,
    and GNOME platform snaps.

    Args:
        name: Snap package name.
        notes: Value from the Notes column of ``snap list``.

    Returns:
        True if the snap should be filtered out.
    """
    if set(notes.split(",")) & _RUNTIME_NOTES:
        return True

    if name in _RUNTIME_NAMES:
        return True

    if _CORE_SNAP.match(name):
        return True

    return name.startswith("gnome-") and (name.endswith("-platform") or name[6:7].isdigit())
