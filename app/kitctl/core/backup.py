"""Backup service.

Backs up several sources in parallel, one worker per source. A source that
fails is logged and reported without affecting the others, and only the
sources that completed get their last-backup time updated. Config apps
are plain file copies and are backed up the same way, one after another.
"""

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import TypeVar

from kitctl.adapters.registry import AdapterRegistry
from kitctl.core.paths import resolve_env_path
from kitctl.core.snapshots import KEYBINDINGS_FILENAME, SETTINGS_FILENAME, SnapshotStore
from kitctl.errors import ConfigurationError, SourceError
from kitctl.models.action import BackupReport
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

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BackupService:
    """Writes snapshots for managers and host apps and copies config app files.

    Each snapshot comes from a single strict listing call. When the listing
    fails nothing is written, so the previous snapshot stays in place.

    Example:
        >>> service = BackupService(registry, SnapshotStore(Path("~/kit")))
        >>> report = service.backup(["apt", "vscode"])
        >>> report.failed
        {}
    """

    def __init__(
        self,
        registry: AdapterRegistry,
        store: SnapshotStore,
        workers: int = 4,
    ) -> None:
        """Initialize the service.

        Args:
            registry: Source adapters.
            store: Snapshot store to write into.
            workers: Maximum sources backed up in parallel.
        """
        self._registry = registry
        self._store = store
        self._workers = max(1, workers)

    @property
    def platform(self) -> Platform:
        """Platform whose settings paths are used."""
        return self._registry.platform

    def backup(
        self,
        sources: Sequence[SourceId | str],
        identifiers: Iterable[str] | None = None,
    ) -> BackupReport:
        """Back up sources in parallel.

        Args:
            sources: Sources to back up, in the order results are reported.
            identifiers: When given, only items with these identities are
                written. Meant for backing up a selection from one source.

        Returns:
            BackupReport with the written paths grouped by source in request
            order, the sources that succeeded and an error per failed source.

        Raises:
            ConfigurationError: If any source id is unknown. Nothing is
                backed up in that case.
        """
        targets = _dedupe(
            source if not isinstance(source, str) else parse_source_id(source) for source in sources
        )
        selection = set(identifiers) if identifiers is not None else None

        # Adapters are created up front so workers never race on the registry cache
        for source in targets:
            self._registry.get(source)

        written: dict[BackupTarget, list[Path]] = {}
        failed: dict[BackupTarget, str] = {}

        if targets:
            with ThreadPoolExecutor(max_workers=min(self._workers, len(targets))) as executor:
                futures: dict[SourceId, Future[list[Path]]] = {
                    source: executor.submit(self._backup_one, source, selection)
                    for source in targets
                }
                for source, future in futures.items():
                    try:
                        written[source] = future.result()
                    except (SourceError, OSError) as e:
                        logger.warning("Backup of %s failed: %s", source.value, e)
                        failed[source] = str(e)
                    except Exception as e:
                        logger.exception("Backup of %s failed unexpectedly", source.value)
                        failed[source] = str(e) or type(e).__name__

        return self._finish(targets, written, failed)

    def backup_config_apps(self, apps: Sequence[ConfigAppId | str]) -> BackupReport:
        """Copy the configuration files of config apps into the backup directory.

        Each app's files for this platform are copied, flattened to their
        basename, into ``<root>/<app>/``. Files that do not exist are
        skipped. An app with no files defined for this platform fails.

        Args:
            apps: Config app ids or their string values; duplicates are ignored.

        Returns:
            BackupReport over the requested config apps.

        Raises:
            ConfigurationError: If any config app id is unknown. Nothing is
                backed up in that case.
        """
        targets = _dedupe(
            app if not isinstance(app, str) else parse_config_app_id(app) for app in apps
        )
        written: dict[BackupTarget, list[Path]] = {}
        failed: dict[BackupTarget, str] = {}
        for app in targets:
            try:
                written[app] = self._backup_config_app(app)
            except (ConfigurationError, OSError) as e:
                logger.warning("Backup of %s failed: %s", app.value, e)
                failed[app] = str(e)

        return self._finish(targets, written, failed)

    def _finish(
        self,
        targets: Sequence[BackupTarget],
        written: dict[BackupTarget, list[Path]],
        failed: dict[BackupTarget, str],
    ) -> BackupReport:
        """Update metadata for the targets that succeeded and build the report."""
        succeeded = tuple(target for target in targets if target in written)
        try:
            self._store.mark_backed_up(succeeded)
        except OSError as e:
            logger.warning("Failed to update backup metadata: %s", e)

        return BackupReport(
            written_paths=tuple(path for target in succeeded for path in written[target]),
            succeeded_ids=succeeded,
            failed={target: failed[target] for target in targets if target in failed},
        )

    def _backup_one(self, source: SourceId, selection: set[str] | None) -> list[Path]:
        """Back up one source and return the files written.

        Raises:
            SourceError: If the listing fails.
            OSError: If a file cannot be written.
        """
        records = _select(self._registry.get(source).scan(), selection)
        paths = [self._store.write_snapshot(source, records)]

        if isinstance(source, HostAppId):
            paths.extend(self._backup_host_extras(source, selection))

        logger.info("Backed up %s: %d item(s)", source.value, len(records))
        return paths

    def _backup_host_extras(self, host: HostAppId, selection: set[str] | None) -> list[Path]:
        """Write the WSL extension track and copy settings and aux files."""
        paths: list[Path] = []

        if self.platform is Platform.WIN32:
            wsl_records = _select(self._registry.extension_adapter(host).list_wsl(), selection)
            if wsl_records:
                paths.append(self._store.write_snapshot(host, wsl_records, wsl=True))

        definition = host.definition
        settings_template = definition.settings_dirs.get(self.platform)
        if settings_template is not None:
            settings_dir = Path(resolve_env_path(settings_template, self.platform))
            for name in (SETTINGS_FILENAME, KEYBINDINGS_FILENAME):
                src = settings_dir / name
                if self._store.file_exists(src):
                    paths.append(self._store.copy_file(src, self._store.host_file(host, name)))

        for template in definition.extra_files.get(self.platform, ()):
            src = Path(resolve_env_path(template, self.platform))
            if self._store.file_exists(src):
                paths.append(self._store.copy_file(src, self._store.host_file(host, src.name)))

        return paths

    def _backup_config_app(self, app: ConfigAppId) -> list[Path]:
        """Copy one config app's existing files and return the copies.

        Raises:
            ConfigurationError: If the app defines no files on this platform.
            OSError: If a copy fails.
        """
        templates = app.files_for(self.platform)
        if not templates:
            msg = f"{app.label} has no config files on {self.platform.value}"
            raise ConfigurationError(msg)

        paths: list[Path] = []
        for template in templates:
            src = Path(resolve_env_path(template, self.platform))
            if self._store.file_exists(src):
                dest = self._store.config_app_file(app, src.name)
                paths.append(self._store.copy_file(src, dest))

        logger.info("Backed up %s: %d file(s)", app.value, len(paths))
        return paths


def _select(records: list[PackageRecord], selection: set[str] | None) -> list[PackageRecord]:
    if selection is None:
        return records
    return [record for record in records if record.identity in selection]


def _dedupe(items: Iterable[T]) -> list[T]:
    seen: set[T] = set()
    result: list[T] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def config_app_available(app: ConfigAppId, platform: Platform | None = None) -> bool:
    """Check whether at least one of a config app's files exists.

    Args:
        app: Config app to check.
        platform: Platform whose file list applies. Defaults to the current one.
    """
    platform = platform or Platform.current()
    return any(
        Path(resolve_env_path(template, platform)).is_file() for template in app.files_for(platform)
    )


def config_apps_availability(platform: Platform | None = None) -> dict[ConfigAppId, bool]:
    """Availability of every config app on a platform."""
    return {app: config_app_available(app, platform) for app in ConfigAppId}
