"""Snapshot storage under the backup directory.

Layout::

    <root>/
        backup_metadata.json          {"apt": {"last_backup": "<iso>"}, ...}
        winget_packages.json          one JSON list per manager
        apt_packages.json
        vscode/
            extensions.json
            extensions_wsl.json       Windows hosts only
            settings.json
            keybindings.json
            mcp.json                  auxiliary files, flattened to basename
        git/
            .gitconfig                config app files, flattened to basename
        cache/
            winget_cache.json

Each backup overwrites the previous snapshot; there is no versioning.
"""

import logging
import shutil
import threading
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from pathlib import Path

from pydantic import ValidationError

from kitctl.core.namecache import CACHE_FILENAME
from kitctl.errors import ConfigurationError
from kitctl.models.package import PackageRecord, record_type_for
from kitctl.models.sources import (
    BackupTarget,
    ConfigAppId,
    HostAppId,
    ManagerId,
    SourceId,
    parse_backup_target,
)
from kitctl.utils.fileio import read_json, write_json_atomic

logger = logging.getLogger(__name__)

METADATA_FILENAME = "backup_metadata.json"
EXTENSIONS_FILENAME = "extensions.json"
WSL_EXTENSIONS_FILENAME = "extensions_wsl.json"
SETTINGS_FILENAME = "settings.json"
KEYBINDINGS_FILENAME = "keybindings.json"


class SnapshotStore:
    """Reads and writes snapshots rooted at one backup directory.

    Attributes:
        root: The backup directory.
    """

    def __init__(self, root: Path) -> None:
        self.root = root
        self._metadata_lock = threading.Lock()

    @property
    def metadata_path(self) -> Path:
        """Path of the last-backup metadata file."""
        return self.root / METADATA_FILENAME

    @property
    def cache_path(self) -> Path:
        """Path of the winget display-name cache."""
        return self.root / "cache" / CACHE_FILENAME

    def manager_path(self, manager: ManagerId) -> Path:
        """Snapshot file of a package manager."""
        return self.root / manager.snapshot_filename

    def host_dir(self, host: HostAppId) -> Path:
        """Directory holding a host app's snapshot files."""
        return self.root / host.value

    def host_file(self, host: HostAppId, name: str) -> Path:
        """A file inside a host app's directory, flattened to its basename."""
        return self.host_dir(host) / Path(name).name

    def config_app_dir(self, app: ConfigAppId) -> Path:
        """Directory holding a config app's copied files."""
        return self.root / app.value

    def config_app_file(self, app: ConfigAppId, name: str) -> Path:
        """A copied config file, flattened to its basename."""
        return self.config_app_dir(app) / Path(name).name

    def snapshot_path(self, source: SourceId, wsl: bool = False) -> Path:
        """Snapshot file of any source.

        Args:
            source: Manager or host app.
            wsl: Select the WSL extension track of a host app.

        Raises:
            ConfigurationError: If ``wsl`` is requested for a manager.
        """
        if isinstance(source, HostAppId):
            name = WSL_EXTENSIONS_FILENAME if wsl else EXTENSIONS_FILENAME
            return self.host_file(source, name)
        if wsl:
            msg = f"{source.label} has no WSL snapshot; only host apps do"
            raise ConfigurationError(msg)
        return self.manager_path(source)

    def read_snapshot(self, source: SourceId, wsl: bool = False) -> list[PackageRecord]:
        """Read a snapshot.

        A missing or corrupt file reads as an empty list. Entries that do
        not validate against the source's record model are skipped.

        Args:
            source: Manager or host app.
            wsl: Read the WSL extension track of a host app.

        Returns:
            Records in file order.
        """
        path = self.snapshot_path(source, wsl)
        raw = read_json(path, default=[])
        if not isinstance(raw, list):
            logger.warning("Ignoring snapshot %s: expected a JSON list", path)
            return []

        record_type = record_type_for(source)
        records: list[PackageRecord] = []
        for index, entry in enumerate(raw):
            try:
                records.append(record_type.model_validate(entry))
            except ValidationError as e:
                logger.debug("Skipping invalid entry %d in %s: %s", index, path, e)
        return records

    def write_snapshot(
        self,
        source: SourceId,
        records: Sequence[PackageRecord],
        wsl: bool = False,
    ) -> Path:
        """Write a snapshot atomically, replacing the previous one.

        Returns:
            Path of the written file.

        Raises:
            OSError: If the file cannot be written.
        """
        path = self.snapshot_path(source, wsl)
        return write_json_atomic(path, [record.to_snapshot() for record in records])

    def file_exists(self, path: Path) -> bool:
        """Check whether a regular file exists."""
        return path.is_file()

    def copy_file(self, src: Path, dest: Path) -> Path:
        """Copy a file, creating the destination's parent directories.

        Raises:
            OSError: If the copy fails.
        """
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dest)
        return dest

    def last_modified(self, path: Path) -> datetime | None:
        """Modification time of a file, or None if it does not exist."""
        try:
            return datetime.fromtimestamp(path.stat().st_mtime, tz=UTC)
        except OSError:
            return None

    def read_metadata(self) -> dict[BackupTarget, datetime]:
        """Read when each source and config app was last backed up.

        Unknown ids and unparsable timestamps are skipped.
        """
        raw = read_json(self.metadata_path, default={})
        if not isinstance(raw, dict):
            logger.warning(
                "Ignoring backup metadata %s: expected a JSON object", self.metadata_path
            )
            return {}

        metadata: dict[BackupTarget, datetime] = {}
        for key, value in raw.items():
            try:
                source = parse_backup_target(key)
                stamp = datetime.fromisoformat(value["last_backup"])
            except (ConfigurationError, KeyError, TypeError, ValueError) as e:
                logger.debug("Skipping metadata entry %r: %s", key, e)
                continue
            metadata[source] = stamp
        return metadata

    def mark_backed_up(
        self, sources: Iterable[BackupTarget], when: datetime | None = None
    ) -> None:
        """Record a successful backup for each source or config app.

        Entries for other sources are preserved.

        Raises:
            OSError: If the metadata file cannot be written.
        """
        sources = list(sources)
        if not sources:
            return

        stamp = (when or datetime.now(UTC)).isoformat()
        with self._metadata_lock:
            raw = read_json(self.metadata_path, default={})
            data = raw if isinstance(raw, dict) else {}
            for source in sources:
                data[source.value] = {"last_backup": stamp}
            write_json_atomic(self.metadata_path, data)
