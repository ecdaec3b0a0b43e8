"""Unit tests for the snapshot store."""

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest
from kitctl.core.snapshots import SnapshotStore
from kitctl.errors import ConfigurationError
from kitctl.models.package import AptItem, ExtensionRecord, WingetItem
from kitctl.models.sources import ConfigAppId, HostAppId, ManagerId


@pytest.fixture
def store(tmp_path: Path) -> SnapshotStore:
    """Snapshot store rooted in a temporary directory."""
    return SnapshotStore(tmp_path)


class TestLayout:
    """Tests for snapshot file locations."""

    @pytest.mark.parametrize(
        ("manager", "filename"),
        [
            (ManagerId.WINGET, "winget_packages.json"),
            (ManagerId.MSSTORE, "msstore_packages.json"),
            (ManagerId.SCOOP, "scoop_apps.json"),
            (ManagerId.CHOCOLATEY, "chocolatey_packages.json"),
            (ManagerId.APT, "apt_packages.json"),
            (ManagerId.FLATPAK, "flatpak_packages.json"),
        ],
    )
    def test_manager_files(
        self, store: SnapshotStore, tmp_path: Path, manager: ManagerId, filename: str
    ) -> None:
        """Each manager has one file at the backup root."""
        assert store.snapshot_path(manager) == tmp_path / filename

    def test_host_files(self, store: SnapshotStore, tmp_path: Path) -> None:
        """Host apps keep their files in a directory of their own."""
        assert store.snapshot_path(HostAppId.VSCODE) == tmp_path / "vscode" / "extensions.json"
        assert store.snapshot_path(HostAppId.VSCODE, wsl=True) == (
            tmp_path / "vscode" / "extensions_wsl.json"
        )

    def test_host_file_flattens_to_basename(self, store: SnapshotStore, tmp_path: Path) -> None:
        """Auxiliary files are stored by basename."""
        path = store.host_file(HostAppId.ANTIGRAVITY, "~/.gemini/antigravity/mcp_config.json")
        assert path == tmp_path / "antigravity" / "mcp_config.json"

    def test_config_app_files(self, store: SnapshotStore, tmp_path: Path) -> None:
        """Config apps keep flattened copies in a directory named after the app."""
        assert store.config_app_dir(ConfigAppId.SSH) == tmp_path / "ssh"
        path = store.config_app_file(ConfigAppId.SSH, "~/.ssh/config")
        assert path == tmp_path / "ssh" / "config"

    def test_cache_path(self, store: SnapshotStore, tmp_path: Path) -> None:
        """The name cache lives in the cache subdirectory."""
        assert store.cache_path == tmp_path / "cache" / "winget_cache.json"

    def test_wsl_manager_raises(self, store: SnapshotStore) -> None:
        """Managers have no WSL track."""
        with pytest.raises(ConfigurationError):
            store.snapshot_path(ManagerId.APT, wsl=True)


class TestSnapshots:
    """Tests for reading and writing snapshots."""

    def test_write_uses_native_field_names(self, store: SnapshotStore) -> None:
        """Records are written with the manager's field names."""
        path = store.write_snapshot(
            ManagerId.WINGET,
            [WingetItem(package_id="Git.Git", name="Git", version="2.43.0")],
        )

        assert json.loads(path.read_text(encoding="utf-8")) == [
            {"PackageId": "Git.Git", "Name": "Git", "Version": "2.43.0"}
        ]

    def test_write_then_read(self, store: SnapshotStore) -> None:
        """A written snapshot reads back as the same records."""
        records = [ExtensionRecord(id="ms-python.python", version="2024.0.1")]
        store.write_snapshot(HostAppId.VSCODE, records)

        assert store.read_snapshot(HostAppId.VSCODE) == records

    def test_write_replaces_previous(self, store: SnapshotStore) -> None:
        """A new snapshot overwrites the old one."""
        store.write_snapshot(ManagerId.APT, [AptItem(package="curl", version="1")])
        store.write_snapshot(ManagerId.APT, [AptItem(package="git", version="2")])

        assert [r.identity for r in store.read_snapshot(ManagerId.APT)] == ["git"]

    def test_missing_snapshot_is_empty(self, store: SnapshotStore) -> None:
        """A source never backed up reads as empty."""
        assert store.read_snapshot(ManagerId.SNAP) == []

    def test_corrupt_snapshot_is_empty(self, store: SnapshotStore, tmp_path: Path) -> None:
        """A corrupt file reads as empty."""
        (tmp_path / "apt_packages.json").write_text("[{", encoding="utf-8")
        assert store.read_snapshot(ManagerId.APT) == []

    def test_invalid_entries_are_skipped(self, store: SnapshotStore, tmp_path: Path) -> None:
        """Entries that do not fit the record model are dropped."""
        (tmp_path / "apt_packages.json").write_text(
            json.dumps([{"Package": "curl", "Version": "1"}, {"Version": "2"}, "junk"]),
            encoding="utf-8",
        )
        assert [r.identity for r in store.read_snapshot(ManagerId.APT)] == ["curl"]


class TestMetadata:
    """Tests for last-backup metadata."""

    def test_mark_and_read(self, store: SnapshotStore) -> None:
        """Marked sources read back with their timestamp."""
        when = datetime(2024, 2, 5, 10, 0, tzinfo=UTC)

        store.mark_backed_up([ManagerId.APT, HostAppId.VSCODE], when)

        assert store.read_metadata() == {ManagerId.APT: when, HostAppId.VSCODE: when}

    def test_mark_preserves_other_entries(self, store: SnapshotStore) -> None:
        """Earlier entries for other sources are kept."""
        first = datetime(2024, 1, 1, tzinfo=UTC)
        second = datetime(2024, 2, 1, tzinfo=UTC)

        store.mark_backed_up([ManagerId.APT], first)
        store.mark_backed_up([ManagerId.SNAP], second)

        assert store.read_metadata() == {ManagerId.APT: first, ManagerId.SNAP: second}

    def test_config_apps_share_the_file(self, store: SnapshotStore) -> None:
        """Config apps are recorded next to sources under their own id."""
        when = datetime(2024, 3, 1, tzinfo=UTC)

        store.mark_backed_up([ManagerId.APT, ConfigAppId.GIT], when)

        data = json.loads(store.metadata_path.read_text(encoding="utf-8"))
        assert set(data) == {"apt", "git"}
        assert store.read_metadata() == {ManagerId.APT: when, ConfigAppId.GIT: when}

    def test_file_format(self, store: SnapshotStore) -> None:
        """Each entry is an object with a last_backup ISO timestamp."""
        store.mark_backed_up([ManagerId.APT], datetime(2024, 2, 5, tzinfo=UTC))

        data = json.loads(store.metadata_path.read_text(encoding="utf-8"))

        assert data == {"apt": {"last_backup": "2024-02-05T00:00:00+00:00"}}

    def test_unknown_and_malformed_entries_skipped(
        self, store: SnapshotStore, tmp_path: Path
    ) -> None:
        """Unknown sources and bad timestamps are ignored."""
        (tmp_path / "backup_metadata.json").write_text(
            json.dumps(
                {
                    "apt": {"last_backup": "2024-02-05T00:00:00+00:00"},
                    "nix": {"last_backup": "2024-02-05T00:00:00+00:00"},
                    "snap": {"last_backup": "yesterday"},
                    "flatpak": "2024",
                }
            ),
            encoding="utf-8",
        )
        assert list(store.read_metadata()) == [ManagerId.APT]

    def test_mark_nothing_writes_nothing(self, store: SnapshotStore) -> None:
        """An empty success list leaves no file behind."""
        store.mark_backed_up([])
        assert not store.metadata_path.exists()


class TestFiles:
    """Tests for file helpers."""

    def test_copy_creates_parents(self, store: SnapshotStore, tmp_path: Path) -> None:
        """copy_file creates the destination directory."""
        src = tmp_path / "settings.json"
        src.write_text("{}", encoding="utf-8")

        dest = store.copy_file(src, tmp_path / "a" / "b" / "settings.json")

        assert dest.read_text(encoding="utf-8") == "{}"

    def test_last_modified(self, store: SnapshotStore, tmp_path: Path) -> None:
        """Existing files report an aware timestamp; missing ones None."""
        path = tmp_path / "x.json"
        path.write_text("[]", encoding="utf-8")

        assert store.last_modified(path).tzinfo is not None  # type: ignore[union-attr]
        assert store.last_modified(tmp_path / "missing.json") is None
