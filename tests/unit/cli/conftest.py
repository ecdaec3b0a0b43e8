"""Fixtures for CLI command tests.

Commands get a real Inventory for a Linux host whose command runner is the
shared ``fake_runner`` double and whose backup directory is temporary.
"""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from kitctl.adapters.registry import AdapterRegistry
from kitctl.core.inventory import Inventory
from kitctl.core.snapshots import SnapshotStore
from kitctl.models.sources import Platform

_COMMAND_MODULES = (
    "backup",
    "detect",
    "diff",
    "files",
    "packages",
    "restore",
    "settings",
    "status",
)


def _install(monkeypatch: pytest.MonkeyPatch, inventory: Inventory) -> None:
    for module in _COMMAND_MODULES:
        monkeypatch.setattr(
            f"kitctl.cli.commands.{module}.get_inventory",
            lambda on_name_progress=None: inventory,
        )


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep config files and editor settings inside tmp_path."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    return home


@pytest.fixture
def backup_dir(tmp_path: Path) -> Path:
    """Temporary backup directory."""
    return tmp_path / "kit"


@pytest.fixture
def inventory(
    fake_runner: MagicMock, backup_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> Inventory:
    """Inventory used by every command, with a backup directory."""
    registry = AdapterRegistry(runner=fake_runner, platform=Platform.LINUX)
    inventory = Inventory(registry, SnapshotStore(backup_dir))
    _install(monkeypatch, inventory)
    return inventory


@pytest.fixture
def unconfigured_inventory(fake_runner: MagicMock, monkeypatch: pytest.MonkeyPatch) -> Inventory:
    """Inventory used by every command, without a backup directory."""
    registry = AdapterRegistry(runner=fake_runner, platform=Platform.LINUX)
    inventory = Inventory(registry, None)
    _install(monkeypatch, inventory)
    return inventory
