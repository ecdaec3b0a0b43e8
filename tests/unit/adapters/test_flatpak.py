"""Unit tests for FlatpakAdapter.

Tests for the tab-separated flatpak listing and install target mapping.
"""

from unittest.mock import MagicMock

import pytest
from kitctl.adapters.flatpak import FlatpakAdapter, parse_flatpak_list
from kitctl.models.package import FlatpakItem
from kitctl.models.sources import ManagerId
from kitctl.utils.shell import CommandResult


class TestFlatpakAdapter:
    """Tests for FlatpakAdapter class."""

    @pytest.fixture
    def adapter(self, fake_runner: MagicMock) -> FlatpakAdapter:
        """Create FlatpakAdapter instance."""
        return FlatpakAdapter(fake_runner)

    def test_source_is_flatpak(self, adapter: FlatpakAdapter) -> None:
        """Adapter returns Flatpak as source."""
        assert adapter.source == ManagerId.FLATPAK

    def test_scan_lists_applications_only(
        self, adapter: FlatpakAdapter, fake_runner: MagicMock, mock_flatpak_output: str
    ) -> None:
        """scan asks flatpak for applications with explicit columns."""
        fake_runner.run.return_value = CommandResult(
            stdout=mock_flatpak_output, stderr="", returncode=0
        )

        records = adapter.scan()

        fake_runner.run.assert_called_once_with(
            ["flatpak", "list", "--app", "--columns=name,application,version,branch,origin"]
        )
        assert len(records) == 3

    def test_install_command_uses_flathub(self, adapter: FlatpakAdapter) -> None:
        """Flatpak installs from flathub without elevation."""
        command = adapter.build_install_command("org.gimp.GIMP")
        assert command.line == "flatpak install -y flathub org.gimp.GIMP"


class TestParseFlatpakList:
    """Tests for parse_flatpak_list function."""

    def test_identity_is_name(self, mock_flatpak_output: str) -> None:
        """Flatpak items are keyed by display name and installed by application id."""
        firefox = parse_flatpak_list(mock_flatpak_output)[0]
        assert firefox == FlatpakItem(
            name="Firefox",
            application="org.mozilla.firefox",
            version="122.0",
            branch="stable",
            origin="flathub",
        )
        assert firefox.identity == "Firefox"
        assert firefox.install_target == "org.mozilla.firefox"

    def test_missing_name_falls_back_to_application(self, mock_flatpak_output: str) -> None:
        """An application without a display name is named by its id."""
        unnamed = parse_flatpak_list(mock_flatpak_output)[2]
        assert unnamed.identity == "com.example.NoName"

    def test_short_line_skipped(self) -> None:
        """A line with a single column is skipped."""
        assert parse_flatpak_list("Firefox\n") == []
