"""Homebrew formula adapter implementation."""

import logging

from kitctl.adapters.base import Adapter, split_lines
from kitctl.models.action import InstallCommand
from kitctl.models.package import HomebrewItem, PackageRecord
from kitctl.models.sources import ManagerId

logger = logging.getLogger(__name__)


class HomebrewAdapter(Adapter):
    """Adapter for Homebrew on macOS and Linux.

    ``brew list --versions`` prints ``name v1 [v2 ...]`` when several
    versions of a formula are kept in the cellar; the last one listed is
    the newest and is the one recorded.
    """

    @property
    def source(self) -> ManagerId:
        """Return Homebrew as the source."""
        return ManagerId.HOMEBREW

    def is_available(self) -> bool:
        """Check if brew is available."""
        return self.runner.exists("brew")

    def _collect(self) -> list[PackageRecord]:
        result = self._run_checked(["brew", "list", "--versions"])
        records: list[PackageRecord] = []
        for line in split_lines(result.stdout):
            parts = line.split()
            if len(parts) < 2:
                logger.debug("Skipping brew line without version: %r", line[:100])
                continue
            records.append(HomebrewItem(name=parts[0], version=parts[-1]))
        return records

    def build_install_command(self, identifier: str, version: str | None = None) -> InstallCommand:
        """Build ``brew install <name>``. Homebrew has no version pinning flag."""
        return InstallCommand(program="brew", args=("install", identifier))
