"""Editor extension adapters.

VS Code and its forks share one extension CLI: ``--list-extensions
--show-versions`` prints ``publisher.name@version`` per line and
``--install-extension`` installs one. On Windows the same CLI can also be
reached inside WSL, which is listed as a separate track.
"""

import logging
from pathlib import Path

from kitctl.adapters.base import Adapter, split_lines
from kitctl.models.action import InstallCommand
from kitctl.models.package import ExtensionRecord, PackageRecord
from kitctl.models.sources import HostAppId, Platform
from kitctl.utils.shell import CommandRunner

logger = logging.getLogger(__name__)


class ExtensionAdapter(Adapter):
    """Adapter for the extensions of one host app.

    On macOS an editor is often installed without its CLI on PATH. The
    adapter then falls back to the binary inside the application bundle,
    checking that it exists without running it.
    """

    def __init__(
        self,
        host: HostAppId,
        runner: CommandRunner | None = None,
        platform: Platform | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            host: Host app whose extensions are managed.
            runner: Command runner used for every external call.
            platform: Host platform. Defaults to the current one.
        """
        super().__init__(runner)
        self._host = host
        self._platform = platform or Platform.current()
        self._program: str | None = None

    @property
    def source(self) -> HostAppId:
        """Return the host app this adapter handles."""
        return self._host

    @property
    def program(self) -> str | None:
        """CLI found by the last availability check, if any."""
        return self._program

    def _resolve_program(self) -> str | None:
        """Find the PATH command, or the macOS bundle binary."""
        definition = self._host.definition
        if self.runner.exists(definition.command):
            return definition.command
        if self._platform is Platform.DARWIN:
            bundled = definition.darwin_binary()
            if bundled is not None and Path(bundled).exists():
                return bundled
        return None

    def is_available(self) -> bool:
        """Check if the host app's CLI can be found and remember where it is."""
        self._program = self._resolve_program()
        return self._program is not None

    def _collect(self) -> list[PackageRecord]:
        program = self._program or self._host.definition.command
        result = self._run_checked([program, "--list-extensions", "--show-versions"])
        return parse_extension_list(result.stdout)

    def build_install_command(self, identifier: str, version: str | None = None) -> InstallCommand:
        """Build ``<cmd> --install-extension <id>``.

        Uses the CLI found by ``is_available``, else the host's PATH command.
        """
        return InstallCommand(
            program=self._program or self._host.definition.command,
            args=("--install-extension", identifier),
        )

    def list_wsl(self) -> list[ExtensionRecord]:
        """List the host app's extensions inside the default WSL distribution.

        Returns:
            Extension records, or an empty list when not on Windows, when
            WSL is unavailable or when the command fails.
        """
        if self._platform is not Platform.WIN32:
            return []
        result = self.runner.run_in_wsl(
            [self._host.definition.command, "--list-extensions", "--show-versions"]
        )
        if not result.success:
            logger.debug(
                "WSL extension listing for %s failed (exit %d)",
                self._host.value,
                result.returncode,
            )
            return []
        return parse_extension_list(result.stdout)

    def build_wsl_install_command(self, identifier: str) -> InstallCommand:
        """Build ``wsl -- <cmd> --install-extension <id>``."""
        return InstallCommand(
            program="wsl",
            args=("--", self._host.definition.command, "--install-extension", identifier),
        )


def parse_extension_list(output: str) -> list[ExtensionRecord]:
    """Parse ``--list-extensions --show-versions`` output.

    Args:
        output: One ``id@version`` per line; lines without ``@`` are id-only.

    Returns:
        ExtensionRecord per listed extension.
    """
    records: list[ExtensionRecord] = []
    for line in split_lines(output):
        ext_id, sep, version = line.strip().partition("@")
        if not ext_id:
            continue
        records.append(ExtensionRecord(id=ext_id, version=version if sep and version else None))
    return records
