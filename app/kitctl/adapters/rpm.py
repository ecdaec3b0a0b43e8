"""YUM and DNF package adapter implementation.

Both managers print the same ``list installed`` table, so a single
adapter class serves either binary.
"""

import logging

from kitctl.adapters.base import Adapter, elevated, split_lines
from kitctl.models.action import InstallCommand
from kitctl.models.package import PackageRecord, YumItem
from kitctl.models.sources import ManagerId
from kitctl.utils.shell import CommandRunner

logger = logging.getLogger(__name__)

# Lowercased fragments of banner lines printed above the package table
_BANNER_MARKERS: tuple[str, ...] = ("installed packages", "loaded plugins", "last metadata")

_KNOWN_ARCHES: frozenset[str] = frozenset(
    {"noarch", "x86_64", "i386", "i686", "aarch64", "armv7hl", "ppc64le", "s390x", "src"}
)

_DEFAULT_ARCH = "noarch"


class RpmAdapter(Adapter):
    """Adapter for the yum and dnf front ends of RPM.

    Example:
        >>> adapter = RpmAdapter(ManagerId.DNF)
        >>> adapter.build_install_command("htop").line
        'sudo dnf install -y htop'
    """

    def __init__(
        self,
        manager: ManagerId,
        runner: CommandRunner | None = None,
        elevation: str | None = "sudo",
    ) -> None:
        """Initialize the adapter.

        Args:
            manager: ManagerId.YUM or ManagerId.DNF.
            runner: Command runner used for every external call.
            elevation: Command prefix for installs. None installs unprefixed.

        Raises:
            ValueError: If manager is not yum or dnf.
        """
        if manager not in (ManagerId.YUM, ManagerId.DNF):
            msg = f"RpmAdapter handles yum and dnf, not {manager.value}"
            raise ValueError(msg)
        super().__init__(runner)
        self._manager = manager
        self._elevation = elevation

    @property
    def source(self) -> ManagerId:
        """Return the manager this adapter was built for."""
        return self._manager

    @property
    def command(self) -> str:
        """Name of the CLI binary."""
        return self._manager.value

    def is_available(self) -> bool:
        """Check if the yum or dnf binary is available."""
        return self.runner.exists(self.command)

    def _collect(self) -> list[PackageRecord]:
        result = self._run_checked([self.command, "list", "installed"])
        return parse_list_installed(result.stdout)

    def build_install_command(self, identifier: str, version: str | None = None) -> InstallCommand:
        """Build ``<elevation> <yum|dnf> install -y <name>``."""
        return elevated(self._elevation, [self.command, "install", "-y", identifier])


def parse_list_installed(output: str) -> list[PackageRecord]:
    """Parse ``yum list installed`` / ``dnf list installed`` output.

    Long package names make yum wrap a row: the ``name.arch`` column sits
    alone on one line and the version and repository follow on the next.
    Such rows are joined back together before parsing.

    Args:
        output: Raw stdout of the listing command.

    Returns:
        YumItem per installed package, in output order.
    """
    records: list[PackageRecord] = []
    pending: str | None = None

    for line in split_lines(output):
        lowered = line.lower()
        if any(marker in lowered for marker in _BANNER_MARKERS):
            continue

        parts = line.split()
        if pending is not None:
            parts = [pending, *parts]
            pending = None
        elif len(parts) == 1:
            pending = parts[0]
            continue

        record = _parse_rpm_row(parts)
        if record is not None:
            records.append(record)

    if pending is not None:
        logger.debug("Dropping dangling wrapped row: %r", pending)
    return records


def _parse_rpm_row(parts: list[str]) -> YumItem | None:
    """Build a record from the whitespace-split columns of one row.

    Args:
        parts: ``[name.arch, version-release, repo...]``.

    Returns:
        YumItem, or None when the row has no version column.
    """
    if len(parts) < 2:
        logger.debug("Skipping malformed rpm row: %r", parts)
        return None

    name, arch = _split_name_arch(parts[0])
    version, _, release = parts[1].partition("-")

    return YumItem(
        name=name,
        version=version,
        release=release or None,
        architecture=arch,
    )


def _split_name_arch(value: str) -> tuple[str, str]:
    """Split ``name.arch`` into its parts, defaulting the arch to noarch."""
    name, dot, arch = value.rpartition(".")
    if dot and name and arch in _KNOWN_ARCHES:
        return name, arch
    return value, _DEFAULT_ARCH
