"""Flatpak application adapter implementation.

Lists installed Flatpak applications using the flatpak CLI.
"""

import logging

from kitctl.adapters.base import Adapter, split_lines
from kitctl.models.action import InstallCommand
from kitctl.models.package import FlatpakItem, PackageRecord
from kitctl.models.sources import ManagerId

logger = logging.getLogger(__name__)

_COLUMNS = "name,application,version,branch,origin"

# Remote applications are restored from
_REMOTE = "flathub"


class FlatpakAdapter(Adapter):
    """Adapter for Flatpak applications.

    Only applications are listed; runtimes are dependencies and come back
    with the applications that need them. Flatpak installs per user, so
    no elevation prefix is used.
    """

    @property
    def source(self) -> ManagerId:
        """Return Flatpak as the source."""
        return ManagerId.FLATPAK

    def is_available(self) -> bool:
        """Check if flatpak CLI is available."""
        return self.runner.exists("flatpak")

    def _collect(self) -> list[PackageRecord]:
        result = self._run_checked(["flatpak", "list", "--app", f"--columns={_COLUMNS}"])
        return parse_flatpak_list(result.stdout)

    def build_install_command(self, identifier: str, version: str | None = None) -> InstallCommand:
        """Build ``flatpak install -y flathub <application>``."""
        return InstallCommand(program="flatpak", args=("install", "-y", _REMOTE, identifier))


def parse_flatpak_list(output: str) -> list[PackageRecord]:
    """Parse tab-separated ``flatpak list`` output.

    Args:
        output: Rows of name, application, version, branch and origin.

    Returns:
        FlatpakItem per installed application.
    """
    records: list[PackageRecord] = []
    for line in split_lines(output):
        record = _parse_flatpak_line(line)
        if record is not None:
            records.append(record)
    return records


def _parse_flatpak_line(line: str) -> FlatpakItem | None:
    """Parse a single line of flatpak list output.

    Args:
        line: Tab-separated line from flatpak list.

    Returns:
        FlatpakItem if parsing succeeds, None otherwise.
    """
    parts = [part.strip() for part in line.split("\t")]
    if len(parts) < 2:
        logger.debug("Skipping malformed flatpak line: %r", line[:100])
        return None

    name, application = parts[0], parts[1]
    if not application:
        return None

    def optional(index: int) -> str | None:
        if len(parts) <= index:
            return None
        return parts[index] or None

    return FlatpakItem(
        # Some applications ship without a display name
        name=name or application,
        application=application,
        version=parts[2] if len(parts) > 2 else "",
        branch=optional(3),
        origin=optional(4),
    )
