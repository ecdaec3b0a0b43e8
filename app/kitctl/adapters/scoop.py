"""Scoop app adapter implementation.

Reads the JSON document printed by ``scoop export``. Scoop is a
PowerShell module, so on Windows every call goes through PowerShell.
"""

import json
import logging

from pydantic import ValidationError

from kitctl.adapters.base import Adapter
from kitctl.errors import ParseError
from kitctl.models.action import InstallCommand
from kitctl.models.package import PackageRecord, ScoopItem
from kitctl.models.sources import ManagerId, Platform
from kitctl.utils.shell import CommandRunner

logger = logging.getLogger(__name__)


class ScoopAdapter(Adapter):
    """Adapter for Scoop apps."""

    def __init__(
        self,
        runner: CommandRunner | None = None,
        platform: Platform | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            runner: Command runner used for every external call.
            platform: Host platform. Defaults to the current one.
        """
        super().__init__(runner)
        self._platform = platform or Platform.current()

    @property
    def source(self) -> ManagerId:
        """Return Scoop as the source."""
        return ManagerId.SCOOP

    def _scoop_args(self, *args: str) -> list[str]:
        if self._platform is Platform.WIN32:
            return ["powershell", "-Command", " ".join(("scoop", *args))]
        return ["scoop", *args]

    def is_available(self) -> bool:
        """Check if scoop is on PATH and, on Windows, answers through PowerShell."""
        if not self.runner.exists("scoop"):
            return False
        if self._platform is not Platform.WIN32:
            return True
        return self.runner.run(self._scoop_args("--version")).success

    def _collect(self) -> list[PackageRecord]:
        result = self._run_checked(self._scoop_args("export"))
        return parse_scoop_export(result.stdout)

    def build_install_command(self, identifier: str, version: str | None = None) -> InstallCommand:
        """Build ``scoop install <app>``."""
        return InstallCommand(program="scoop", args=("install", identifier))


def parse_scoop_export(output: str) -> list[PackageRecord]:
    """Parse the JSON printed by ``scoop export``.

    Args:
        output: Raw stdout. Blank output means nothing is installed.

    Returns:
        ScoopItem per named app; apps without a name are dropped.

    Raises:
        ParseError: If the output is not a JSON object.
    """
    if not output.strip():
        return []

    try:
        document = json.loads(output)
    except json.JSONDecodeError as e:
        raise ParseError(f"scoop export printed invalid JSON: {e}") from e

    if not isinstance(document, dict):
        raise ParseError("scoop export did not print a JSON object")

    apps = document.get("apps")
    if not isinstance(apps, list):
        return []

    records: list[PackageRecord] = []
    for app in apps:
        if not isinstance(app, dict) or not app.get("Name"):
            logger.debug("Skipping unnamed scoop app: %r", app)
            continue
        try:
            records.append(
                ScoopItem(
                    name=app["Name"],
                    version=app.get("Version") or "latest",
                    source=app.get("Source") or None,
                )
            )
        except ValidationError as e:
            logger.debug("Skipping malformed scoop app %r: %s", app, e)
    return records
