"""Unit tests for HomebrewAdapter."""

from unittest.mock import MagicMock

from kitctl.adapters.homebrew import HomebrewAdapter
from kitctl.models.sources import ManagerId
from kitctl.utils.shell import CommandResult


class TestHomebrewAdapter:
    """Tests for HomebrewAdapter class."""

    def test_source_is_homebrew(self, fake_runner: MagicMock) -> None:
        """Adapter returns Homebrew as source."""
        assert HomebrewAdapter(fake_runner).source == ManagerId.HOMEBREW

    def test_scan_uses_newest_version(self, fake_runner: MagicMock, mock_brew_output: str) -> None:
        """With several versions in the cellar the last one listed is recorded."""
        fake_runner.run.return_value = CommandResult(
            stdout=mock_brew_output, stderr="", returncode=0
        )

        records = {r.identity: r for r in HomebrewAdapter(fake_runner).scan()}

        fake_runner.run.assert_called_once_with(["brew", "list", "--versions"])
        assert records["node"].version == "21.5.0"
        assert records["openssl@3"].version == "3.2.0_1"

    def test_install_command_is_not_elevated(self, fake_runner: MagicMock) -> None:
        """brew refuses to run as root, so no prefix is used."""
        command = HomebrewAdapter(fake_runner).build_install_command("git", "2.43.0")
        assert command.argv == ["brew", "install", "git"]
