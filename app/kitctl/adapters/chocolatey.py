"""Chocolatey package adapter implementation.

``choco export`` writes a packages.config XML document to a file; the
adapter exports into a temporary directory and parses the result.
"""

import logging
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path

from kitctl.adapters.base import Adapter
from kitctl.errors import ExecutionError, ParseError
from kitctl.models.action import InstallCommand
from kitctl.models.package import ChocolateyItem, PackageRecord
from kitctl.models.sources import ManagerId

logger = logging.getLogger(__name__)

# Chocolatey itself and its extensions are reinstalled with the manager
_META_PREFIX = "chocolatey"


class ChocolateyAdapter(Adapter):
    """Adapter for Chocolatey packages."""

    @property
    def source(self) -> ManagerId:
        """Return Chocolatey as the source."""
        return ManagerId.CHOCOLATEY

    def is_available(self) -> bool:
        """Check if choco is available."""
        return self.runner.exists("choco")

    def _collect(self) -> list[PackageRecord]:
        with tempfile.TemporaryDirectory(prefix="kitctl-choco-") as tmp:
            export_file = Path(tmp) / "packages.config"
            self._run_checked(["choco", "export", str(export_file), "--include-version-numbers"])
            if not export_file.exists():
                msg = "choco export succeeded but wrote no file"
                raise ExecutionError(msg)
            return parse_packages_config(export_file.read_text(encoding="utf-8"))

    def build_install_command(self, identifier: str, version: str | None = None) -> InstallCommand:
        """Build ``choco install <id> [--version <v>]``.

        Example:
            >>> ChocolateyAdapter().build_install_command("jq", "1.7").args
            ('install', 'jq', '--version', '1.7')
        """
        args = ["install", identifier]
        if version:
            args.extend(["--version", version])
        return InstallCommand(program="choco", args=tuple(args))


def parse_packages_config(xml_text: str) -> list[PackageRecord]:
    """Parse a Chocolatey packages.config document.

    ``<package>`` elements are accepted at the root or nested under
    ``<packages>``. Packages whose id starts with ``chocolatey`` are the
    manager's own meta-packages and are left out.

    Args:
        xml_text: Document written by ``choco export``.

    Returns:
        ChocolateyItem per exported package.

    Raises:
        ParseError: If the document is not well-formed XML.
    """
    if not xml_text.strip():
        return []

    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise ParseError(f"choco export wrote invalid XML: {e}") from e

    records: list[PackageRecord] = []
    for element in root.iter("package"):
        package_id = element.get("id")
        if not package_id:
            logger.debug("Skipping choco package without id: %r", element.attrib)
            continue
        if package_id.startswith(_META_PREFIX):
            continue
        records.append(
            ChocolateyItem(
                package_id=package_id,
                title=package_id,
                version=element.get("version") or "latest",
            )
        )
    return records
