"""APT package adapter implementation.

Lists installed packages from ``dpkg -l`` and installs through apt.
"""

import logging

from kitctl.adapters.base import Adapter, elevated, split_lines
from kitctl.models.action import InstallCommand
from kitctl.models.package import AptItem, PackageRecord
from kitctl.models.sources import ManagerId
from kitctl.utils.shell import CommandRunner

logger = logging.getLogger(__name__)

# Banner lines printed by dpkg -l above the package table
_HEADER_PREFIXES: tuple[str, ...] = ("Desired", "||/", "+++", "| Status", "|/ Err")

# Desired=install, Status=installed
_INSTALLED_STATUS = "ii"


class AptAdapter(Adapter):
    """Adapter for APT/dpkg packages.

    Only rows whose status column is exactly ``ii`` are reported. Rows in
    other states such as ``rc`` (removed, configuration remains) are
    skipped.
    """

    def __init__(self, runner: CommandRunner | None = None, elevation: str | None = "sudo") -> None:
        """Initialize the adapter.

        Args:
            runner: Command runner used for every external call.
            elevation: Command prefix for installs. None installs unprefixed.
        """
        super().__init__(runner)
        self._elevation = elevation

    @property
    def source(self) -> ManagerId:
        """Return APT as the source."""
        return ManagerId.APT

    def is_available(self) -> bool:
        """Check if dpkg is available."""
        return self.runner.exists("dpkg")

    def _collect(self) -> list[PackageRecord]:
        result = self._run_checked(["dpkg", "-l"])
        return parse_dpkg_list(result.stdout)

    def build_install_command(self, identifier: str, version: str | None = None) -> InstallCommand:
        """Build ``<elevation> apt install -y <package>``.

        The version is ignored; apt installs the candidate version.
        """
        return elevated(self._elevation, ["apt", "install", "-y", identifier])


def parse_dpkg_list(output: str) -> list[PackageRecord]:
    """Parse ``dpkg -l`` output into records.

    Args:
        output: Raw stdout of ``dpkg -l``.

    Returns:
        AptItem for every fully installed package, in output order.
    """
    records: list[PackageRecord] = []
    for line in split_lines(output):
        if line.startswith(_HEADER_PREFIXES):
            continue
        record = _parse_dpkg_line(line)
        if record is not None:
            records.append(record)
    return records


def _parse_dpkg_line(line: str) -> AptItem | None:
    """Parse one row of the dpkg table.

    Args:
        line: Whitespace-separated row (status, name, version, arch, description).

    Returns:
        AptItem if the row is an installed package, None otherwise.
    """
    parts = line.split()
    if len(parts) < 3:
        logger.debug("Skipping malformed dpkg line (parts=%d): %r", len(parts), line[:100])
        return None

    if parts[0] != _INSTALLED_STATUS:
        return None

    return AptItem(
        package=parts[1],
        version=parts[2],
        architecture=parts[3] if len(parts) > 3 else None,
    )
