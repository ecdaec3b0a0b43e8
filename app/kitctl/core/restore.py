"""Restore service.

Turns a RestoreRequest into install commands and then either runs them
one by one, renders them as a script for preview, or writes that script
to a file. Also copies backed-up editor settings back into place.
"""

import logging
import os
import tempfile
from collections.abc import Callable, Sequence
from datetime import datetime
from enum import Enum
from pathlib import Path

from kitctl.adapters.registry import AdapterRegistry
from kitctl.core.paths import resolve_env_path
from kitctl.core.snapshots import KEYBINDINGS_FILENAME, SETTINGS_FILENAME, SnapshotStore
from kitctl.errors import ConfigurationError
from kitctl.models.action import InstallCommand, InstallOutcome, RestoreRequest
from kitctl.models.sources import ConfigAppId, HostAppId, Platform

logger = logging.getLogger(__name__)

POSIX_SHEBANG = "#!/usr/bin/env bash"

# Called with (completed, total, outcome) after each install
InstallProgressCallback = Callable[[int, int, InstallOutcome], None]


class ScriptKind(Enum):
    """Flavor of a generated install script."""

    POSIX = "posix"
    POWERSHELL = "powershell"

    @property
    def extension(self) -> str:
        """File extension including the dot."""
        return ".ps1" if self is ScriptKind.POWERSHELL else ".sh"

    @property
    def newline(self) -> str:
        """Line terminator written into the script."""
        return "\r\n" if self is ScriptKind.POWERSHELL else "\n"

    @classmethod
    def default_for(cls, platform: Platform) -> "ScriptKind":
        """PowerShell on Windows, POSIX shell everywhere else."""
        return cls.POWERSHELL if platform is Platform.WIN32 else cls.POSIX

    @classmethod
    def for_path(cls, path: Path, platform: Platform) -> "ScriptKind":
        """Pick the kind from a file suffix, else the platform default."""
        suffix = path.suffix.lower()
        if suffix == ".ps1":
            return cls.POWERSHELL
        if suffix == ".sh":
            return cls.POSIX
        return cls.default_for(platform)


def render_script(commands: Sequence[InstallCommand], kind: ScriptKind) -> str:
    """Serialize commands as a script, one command per line.

    Arguments are joined with single spaces and not quoted. POSIX scripts
    start with a bash shebang. The text ends with a newline.

    Args:
        commands: Commands in execution order.
        kind: Script flavor.

    Returns:
        The script text.
    """
    lines = [command.line for command in commands]
    if kind is ScriptKind.POSIX:
        lines.insert(0, POSIX_SHEBANG)
    return kind.newline.join(lines) + kind.newline


class RestoreService:
    """Synthesizes and runs install commands for restore requests.

    Example:
        >>> service = RestoreService(registry, store)
        >>> request = RestoreRequest(ManagerId.APT, ("curl",))
        >>> [c.line for c in service.synthesize(request)]
        ['sudo apt install -y curl']
    """

    def __init__(self, registry: AdapterRegistry, store: SnapshotStore | None = None) -> None:
        """Initialize the service.

        Args:
            registry: Source adapters that build the install commands.
            store: Snapshot store used to look up install targets and
                backed-up settings. Optional for command synthesis.
        """
        self._registry = registry
        self._store = store

    @property
    def platform(self) -> Platform:
        """Platform the restore runs on."""
        return self._registry.platform

    def synthesize(self, request: RestoreRequest, wsl: bool = False) -> list[InstallCommand]:
        """Build one install command per identifier, in request order.

        Args:
            request: What to install.
            wsl: Install host-app extensions inside WSL instead.

        Returns:
            Commands in exactly the order of ``request.identifiers``.

        Raises:
            ConfigurationError: If ``wsl`` is requested for a manager.
        """
        if wsl:
            if not isinstance(request.target, HostAppId):
                msg = f"{request.target.label} cannot be restored inside WSL"
                raise ConfigurationError(msg)
            adapter = self._registry.extension_adapter(request.target)
            return [adapter.build_wsl_install_command(ident) for ident in request.identifiers]

        adapter = self._registry.get(request.target)
        targets = self._install_targets(request)
        return [
            adapter.build_install_command(targets.get(ident, ident), request.version_of(ident))
            for ident in request.identifiers
        ]

    def _install_targets(self, request: RestoreRequest) -> dict[str, str]:
        """Map identities to install targets where the two differ.

        Flatpak items are keyed by display name but installed by
        application id; the snapshot holds both.
        """
        if self._store is None:
            return {}
        return {
            record.identity: record.install_target
            for record in self._store.read_snapshot(request.target)
            if record.install_target != record.identity
        }

    def preview_script(
        self,
        request: RestoreRequest,
        kind: ScriptKind | None = None,
        wsl: bool = False,
    ) -> str:
        """Render the install script without writing it anywhere."""
        kind = kind or ScriptKind.default_for(self.platform)
        return render_script(self.synthesize(request, wsl=wsl), kind)

    def write_script(
        self,
        request: RestoreRequest,
        output_path: Path | None = None,
        wsl: bool = False,
    ) -> Path:
        """Write the install script to a file.

        Args:
            request: What to install.
            output_path: Target file. Its suffix (``.ps1`` or ``.sh``) picks
                the script kind. Defaults to a timestamped file in the
                system temp directory.
            wsl: Install host-app extensions inside WSL instead.

        Returns:
            Path of the written script. POSIX scripts are made executable.

        Raises:
            OSError: If the file cannot be written.
        """
        if output_path is None:
            kind = ScriptKind.default_for(self.platform)
            stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            output_path = Path(tempfile.gettempdir()) / f"kitctl_install_{stamp}{kind.extension}"
        else:
            kind = ScriptKind.for_path(output_path, self.platform)

        content = render_script(self.synthesize(request, wsl=wsl), kind)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", encoding="utf-8", newline="") as f:
            f.write(content)

        if kind is ScriptKind.POSIX:
            os.chmod(output_path, 0o755)

        logger.info("Wrote %s script to %s", kind.value, output_path)
        return output_path

    def execute(
        self,
        request: RestoreRequest,
        wsl: bool = False,
        on_progress: InstallProgressCallback | None = None,
    ) -> list[InstallOutcome]:
        """Run the install commands one after another.

        A failed install is recorded and the remaining identifiers are
        still attempted.

        Args:
            request: What to install.
            wsl: Install host-app extensions inside WSL instead.
            on_progress: Called after each install.

        Returns:
            One outcome per identifier, in request order.
        """
        commands = self.synthesize(request, wsl=wsl)
        outcomes: list[InstallOutcome] = []

        for index, (ident, command) in enumerate(zip(request.identifiers, commands, strict=True)):
            logger.info("Installing %s: %s", ident, command.line)
            result = self._registry.runner.run(command.argv)
            outcome = InstallOutcome(
                identifier=ident,
                command=command,
                success=result.success,
                exit_code=result.returncode,
                error=None if result.success else (result.stderr.strip() or result.stdout.strip()),
            )
            if outcome.failed:
                logger.warning("Install of %s failed (exit %d)", ident, result.returncode)
            outcomes.append(outcome)
            if on_progress is not None:
                on_progress(index + 1, len(commands), outcome)

        return outcomes

    def restore_host_settings(self, host: HostAppId) -> list[Path]:
        """Copy a host app's backed-up settings files back into place.

        Settings and keybindings go to the app's user settings directory;
        auxiliary files go to their configured locations. Files that were
        never backed up are skipped.

        Returns:
            Destination paths that were written.

        Raises:
            ConfigurationError: If no snapshot store is configured.
            OSError: If a copy fails.
        """
        if self._store is None:
            msg = "Restoring settings needs a backup directory"
            raise ConfigurationError(msg)

        definition = host.definition
        written: list[Path] = []

        settings_template = definition.settings_dirs.get(self.platform)
        if settings_template is not None:
            settings_dir = Path(resolve_env_path(settings_template, self.platform))
            for name in (SETTINGS_FILENAME, KEYBINDINGS_FILENAME):
                src = self._store.host_file(host, name)
                if self._store.file_exists(src):
                    written.append(self._store.copy_file(src, settings_dir / name))

        for template in definition.extra_files.get(self.platform, ()):
            dest = Path(resolve_env_path(template, self.platform))
            src = self._store.host_file(host, dest.name)
            if self._store.file_exists(src):
                written.append(self._store.copy_file(src, dest))

        logger.info("Restored %d settings file(s) for %s", len(written), host.value)
        return written

    def restore_config_app(self, app: ConfigAppId) -> list[Path]:
        """Copy a config app's backed-up files back to their locations.

        Every file template of this platform whose basename was backed up
        is restored, creating parent directories as needed.

        Returns:
            Destination paths that were written.

        Raises:
            ConfigurationError: If no snapshot store is configured.
            OSError: If a copy fails.
        """
        if self._store is None:
            msg = "Restoring config files needs a backup directory"
            raise ConfigurationError(msg)

        written: list[Path] = []
        for template in app.files_for(self.platform):
            dest = Path(resolve_env_path(template, self.platform))
            src = self._store.config_app_file(app, dest.name)
            if self._store.file_exists(src):
                written.append(self._store.copy_file(src, dest))

        logger.info("Restored %d config file(s) for %s", len(written), app.value)
        return written
