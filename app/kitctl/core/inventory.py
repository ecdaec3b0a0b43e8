"""Inventory facade.

The single entry point the CLI uses: detection, live and backed-up
listings, reconciliation, backup and restore of sources and config apps. ``Inventory.from_config``
wires every collaborator from the application config.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime
from pathlib import Path

from kitctl.adapters.registry import AdapterRegistry
from kitctl.core.backup import BackupService, config_apps_availability
from kitctl.core.config import AppConfig
from kitctl.core.namecache import (
    CACHE_FILENAME,
    DisplayNameCache,
    DisplayNameResolver,
    ProgressCallback,
)
from kitctl.core.paths import get_cache_dir
from kitctl.core.reconcile import merge_records
from kitctl.core.restore import InstallProgressCallback, RestoreService, ScriptKind
from kitctl.core.snapshots import SnapshotStore
from kitctl.errors import ConfigurationError
from kitctl.models.action import BackupReport, InstallOutcome, RestoreRequest
from kitctl.models.merge import MergedItem
from kitctl.models.package import PackageRecord
from kitctl.models.sources import (
    BackupTarget,
    ConfigAppId,
    HostAppId,
    Platform,
    SourceId,
    parse_config_app_id,
    parse_source_id,
)
from kitctl.utils.shell import CommandRunner

logger = logging.getLogger(__name__)


class Inventory:
    """Facade over adapters, snapshots, backup and restore.

    Operations that read or write snapshots need a backup directory and
    raise ConfigurationError without one. Live listing and restore script
    synthesis work regardless.
    """

    def __init__(
        self,
        registry: AdapterRegistry,
        store: SnapshotStore | None,
        backup_workers: int = 4,
    ) -> None:
        """Initialize the facade.

        Args:
            registry: Source adapters.
            store: Snapshot store, or None when no backup directory is set.
            backup_workers: Sources backed up in parallel.
        """
        self.registry = registry
        self._store = store
        self._backup_workers = backup_workers
        self._restore = RestoreService(registry, store)

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        runner: CommandRunner | None = None,
        platform: Platform | None = None,
        on_name_progress: ProgressCallback | None = None,
    ) -> Inventory:
        """Build an Inventory from the application config.

        The winget name cache lives in the backup directory when one is
        set, and in the user cache directory otherwise.
        """
        runner = runner or CommandRunner()
        root = config.backup_directory.expanduser() if config.backup_directory else None
        store = SnapshotStore(root) if root is not None else None
        cache_path = store.cache_path if store is not None else get_cache_dir() / CACHE_FILENAME

        resolver = DisplayNameResolver(
            DisplayNameCache(cache_path),
            runner=runner,
            workers=config.name_workers,
        )
        registry = AdapterRegistry(
            runner=runner,
            elevation=config.elevation_command,
            platform=platform,
            resolver=resolver,
            on_name_progress=on_name_progress,
        )
        return cls(registry, store, backup_workers=config.backup_workers)

    @property
    def store(self) -> SnapshotStore:
        """Snapshot store.

        Raises:
            ConfigurationError: If no backup directory is configured.
        """
        if self._store is None:
            msg = "Backup directory is not set. Run 'kitctl config set-backup-dir PATH' first."
            raise ConfigurationError(msg)
        return self._store

    @property
    def platform(self) -> Platform:
        """Host platform."""
        return self.registry.platform

    def detect_available_sources(self) -> dict[SourceId, bool]:
        """Availability of every source meaningful on this platform."""
        return self.registry.detect()

    def list_installed(self, source: SourceId | str) -> list[PackageRecord]:
        """List installed items; failures are logged and yield an empty list."""
        return self.registry.get(source).list_installed()

    def list_backed_up(self, source: SourceId | str, wsl: bool = False) -> list[PackageRecord]:
        """Read the source's snapshot; a missing snapshot yields an empty list."""
        return self.store.read_snapshot(_source(source), wsl=wsl)

    def reconcile(self, source: SourceId | str) -> list[MergedItem]:
        """Merge the live listing with the snapshot of one source."""
        source = _source(source)
        return merge_records(self.list_installed(source), self.list_backed_up(source))

    def reconcile_wsl(self, host: HostAppId | str) -> list[MergedItem]:
        """Merge a host app's WSL extensions with its WSL snapshot.

        The WSL track is kept apart from the host-side snapshot.

        Raises:
            ConfigurationError: If the source is not a host app.
        """
        source = _source(host)
        if not isinstance(source, HostAppId):
            msg = f"{source.label} has no WSL track; only host apps do"
            raise ConfigurationError(msg)
        live = self.registry.extension_adapter(source).list_wsl()
        return merge_records(live, self.list_backed_up(source, wsl=True))

    def backup(
        self,
        sources: Sequence[SourceId | str],
        identifiers: Iterable[str] | None = None,
    ) -> BackupReport:
        """Back up sources in parallel; see BackupService.backup."""
        service = BackupService(self.registry, self.store, workers=self._backup_workers)
        return service.backup(sources, identifiers=identifiers)

    def backup_metadata(self) -> dict[BackupTarget, datetime]:
        """When each source and config app was last backed up."""
        return self.store.read_metadata()

    def detect_config_apps(self) -> dict[ConfigAppId, bool]:
        """Whether any file of each config app exists on this machine."""
        return config_apps_availability(self.platform)

    def backup_config_apps(self, apps: Sequence[ConfigAppId | str]) -> BackupReport:
        """Copy config app files into the backup directory; see BackupService."""
        service = BackupService(self.registry, self.store, workers=self._backup_workers)
        return service.backup_config_apps(apps)

    def restore_execute(
        self,
        request: RestoreRequest,
        wsl: bool = False,
        on_progress: InstallProgressCallback | None = None,
    ) -> list[InstallOutcome]:
        """Install the requested items one by one, continuing past failures."""
        return self._restore.execute(request, wsl=wsl, on_progress=on_progress)

    def restore_preview_script(
        self,
        request: RestoreRequest,
        kind: ScriptKind | None = None,
        wsl: bool = False,
    ) -> str:
        """Script text for the request, without writing a file."""
        return self._restore.preview_script(request, kind=kind, wsl=wsl)

    def restore_write_script(
        self,
        request: RestoreRequest,
        output_path: Path | None = None,
        wsl: bool = False,
    ) -> Path:
        """Write the request's install script and return its path."""
        return self._restore.write_script(request, output_path=output_path, wsl=wsl)

    def restore_host_settings(self, host: HostAppId | str) -> list[Path]:
        """Copy a host app's backed-up settings back into place."""
        source = _source(host)
        if not isinstance(source, HostAppId):
            msg = f"{source.label} has no settings to restore; only host apps do"
            raise ConfigurationError(msg)
        return RestoreService(self.registry, self.store).restore_host_settings(source)

    def restore_config_app(self, app: ConfigAppId | str) -> list[Path]:
        """Copy a config app's backed-up files back into place."""
        if isinstance(app, str):
            app = parse_config_app_id(app)
        return RestoreService(self.registry, self.store).restore_config_app(app)


def _source(source: SourceId | str) -> SourceId:
    return parse_source_id(source) if isinstance(source, str) else source
