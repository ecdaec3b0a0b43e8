"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules. Captured CLI
output lives in tests/fixtures/ and is exposed through one fixture per
package manager.
"""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from kitctl.utils.shell import CommandResult, CommandRunner

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def fake_runner() -> MagicMock:
    """Command runner double: every program exists and every command succeeds."""
    runner = MagicMock(spec=CommandRunner)
    runner.exists.return_value = True
    runner.run.return_value = CommandResult(stdout="", stderr="", returncode=0)
    runner.run_in_wsl.return_value = CommandResult(
        stdout="", stderr="WSL is not available on this host", returncode=127
    )
    return runner


@pytest.fixture
def mock_dpkg_output() -> str:
    """dpkg -l output with banner lines, one ii row and one rc row."""
    return _read_fixture("dpkg_list.txt")


@pytest.fixture
def mock_dnf_output() -> str:
    """dnf list installed output including a wrapped row."""
    return _read_fixture("dnf_list_installed.txt")


@pytest.fixture
def mock_zypper_output() -> str:
    """zypper se -i -s table with a pattern row."""
    return _read_fixture("zypper_search.txt")


@pytest.fixture
def mock_snap_output() -> str:
    """snap list output mixing apps and runtime snaps."""
    return _read_fixture("snap_list.txt")


@pytest.fixture
def mock_flatpak_output() -> str:
    """Tab-separated flatpak list --app output."""
    return _read_fixture("flatpak_list.txt")


@pytest.fixture
def mock_brew_output() -> str:
    """brew list --versions output."""
    return _read_fixture("brew_list_versions.txt")


@pytest.fixture
def mock_pacman_output() -> str:
    """pacman -Q output."""
    return _read_fixture("pacman_q.txt")


@pytest.fixture
def mock_winget_export() -> str:
    """Document written by winget export."""
    return _read_fixture("winget_export.json")


@pytest.fixture
def mock_winget_show() -> str:
    """English winget show output."""
    return _read_fixture("winget_show.txt")


@pytest.fixture
def mock_winget_show_ja() -> str:
    """Japanese winget show output."""
    return _read_fixture("winget_show_ja.txt")


@pytest.fixture
def mock_winget_search() -> str:
    """winget search table output."""
    return _read_fixture("winget_search.txt")


@pytest.fixture
def mock_choco_config() -> str:
    """packages.config written by choco export."""
    return _read_fixture("choco_packages.config")


@pytest.fixture
def mock_scoop_export() -> str:
    """JSON printed by scoop export."""
    return _read_fixture("scoop_export.json")


@pytest.fixture
def mock_extensions_output() -> str:
    """code --list-extensions --show-versions output."""
    return _read_fixture("code_extensions.txt")


@pytest.fixture
def mock_empty_output() -> str:
    """Empty output for testing edge cases."""
    return ""
