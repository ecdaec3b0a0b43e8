"""Pacman package adapter implementation."""

import logging

from kitctl.adapters.base import Adapter, elevated, split_lines
from kitctl.models.action import InstallCommand
from kitctl.models.package import PackageRecord, PacmanItem
from kitctl.models.sources import ManagerId
from kitctl.utils.shell import CommandRunner

logger = logging.getLogger(__name__)


class PacmanAdapter(Adapter):
    """Adapter for Arch Linux pacman packages, listed with ``pacman -Q``."""

    def __init__(self, runner: CommandRunner | None = None, elevation: str | None = "sudo") -> None:
        super().__init__(runner)
        self._elevation = elevation

    @property
    def source(self) -> ManagerId:
        """Return Pacman as the source."""
        return ManagerId.PACMAN

    def is_available(self) -> bool:
        """Check if pacman is available."""
        return self.runner.exists("pacman")

    def _collect(self) -> list[PackageRecord]:
        result = self._run_checked(["pacman", "-Q"])
        records: list[PackageRecord] = []
        for line in split_lines(result.stdout):
            parts = line.split()
            if len(parts) < 2:
                logger.debug("Skipping malformed pacman line: %r", line[:100])
                continue
            records.append(PacmanItem(name=parts[0], version=parts[1]))
        return records

    def build_install_command(self, identifier: str, version: str | None = None) -> InstallCommand:
        """Build ``<elevation> pacman -S --noconfirm <name>``."""
        return elevated(self._elevation, ["pacman", "-S", "--noconfirm", identifier])
