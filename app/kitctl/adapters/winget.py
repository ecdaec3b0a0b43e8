"""Winget and Microsoft Store adapter implementation.

Both sources are listed through ``winget export``, which writes a JSON
document to a file. The export carries identifiers and versions only, so
display names come from the DisplayNameResolver.
"""

import json
import logging
import tempfile
from pathlib import Path
from typing import Any

from kitctl.adapters.base import Adapter
from kitctl.core.namecache import DisplayNameResolver, ProgressCallback, fallback_display_name
from kitctl.errors import ExecutionError, ParseError
from kitctl.models.action import InstallCommand
from kitctl.models.package import PackageRecord, WingetItem
from kitctl.models.sources import ManagerId
from kitctl.utils.shell import CommandRunner

logger = logging.getLogger(__name__)


class WingetAdapter(Adapter):
    """Adapter for packages from a winget source.

    Example:
        >>> store = WingetAdapter(ManagerId.MSSTORE, resolver=resolver)
        >>> store.build_install_command("9NBLGGH4NNS1").line
        'winget install 9NBLGGH4NNS1'
    """

    def __init__(
        self,
        manager: ManagerId = ManagerId.WINGET,
        runner: CommandRunner | None = None,
        resolver: DisplayNameResolver | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            manager: ManagerId.WINGET or ManagerId.MSSTORE.
            runner: Command runner used for every external call.
            resolver: Display-name resolver. Without one, names are derived
                from the identifiers.
            on_progress: Observer for name resolution progress.

        Raises:
            ValueError: If manager is not a winget source.
        """
        if manager not in (ManagerId.WINGET, ManagerId.MSSTORE):
            msg = f"WingetAdapter handles winget and msstore, not {manager.value}"
            raise ValueError(msg)
        super().__init__(runner)
        self._manager = manager
        self._resolver = resolver
        self._on_progress = on_progress

    @property
    def source(self) -> ManagerId:
        """Return the winget source this adapter lists."""
        return self._manager

    def is_available(self) -> bool:
        """Check if winget is available. The Store source depends on it too."""
        return self.runner.exists("winget")

    def _collect(self) -> list[PackageRecord]:
        with tempfile.TemporaryDirectory(prefix="kitctl-winget-") as tmp:
            export_file = Path(tmp) / "export.json"
            self._run_checked(
                [
                    "winget",
                    "export",
                    "-s",
                    self._manager.value,
                    "-o",
                    str(export_file),
                    "--disable-interactivity",
                    "--include-versions",
                ]
            )
            if not export_file.exists():
                msg = "winget export succeeded but wrote no file"
                raise ExecutionError(msg)
            packages = parse_export(export_file.read_text(encoding="utf-8-sig"))

        ids = [package_id for package_id, _ in packages]
        if self._resolver is not None:
            names = self._resolver.resolve_many(ids, on_progress=self._on_progress)
        else:
            names = [fallback_display_name(package_id) for package_id in ids]

        return [
            WingetItem(package_id=package_id, name=name, version=version)
            for (package_id, version), name in zip(packages, names, strict=True)
        ]

    def build_install_command(self, identifier: str, version: str | None = None) -> InstallCommand:
        """Build ``winget install <id>``."""
        return InstallCommand(program="winget", args=("install", identifier))


def parse_export(text: str) -> list[tuple[str, str]]:
    """Parse a ``winget export`` document.

    Packages are taken from the first entry of ``Sources`` that carries a
    ``Packages`` list.

    Args:
        text: Contents of the export file.

    Returns:
        ``(identifier, version)`` pairs; the version defaults to ``"latest"``.

    Raises:
        ParseError: If the document is not valid JSON.
    """
    if not text.strip():
        return []

    try:
        document: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"winget export wrote invalid JSON: {e}") from e

    sources = document.get("Sources") if isinstance(document, dict) else None
    if not isinstance(sources, list):
        return []

    packages: list[Any] = []
    for source in sources:
        if isinstance(source, dict) and isinstance(source.get("Packages"), list):
            packages = source["Packages"]
            break

    result: list[tuple[str, str]] = []
    for package in packages:
        if not isinstance(package, dict):
            continue
        package_id = package.get("PackageIdentifier")
        if not package_id or not isinstance(package_id, str):
            logger.debug("Skipping winget entry without identifier: %r", package)
            continue
        version = package.get("Version") or "latest"
        if not isinstance(version, str):
            logger.debug("Skipping winget entry with malformed version: %r", package)
            continue
        result.append((package_id, version))
    return result
