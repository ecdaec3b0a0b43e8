"""Unit tests for ScoopAdapter.

Tests for the scoop export JSON parser and PowerShell invocation.
"""

from unittest.mock import MagicMock

import pytest
from kitctl.adapters.scoop import ScoopAdapter, parse_scoop_export
from kitctl.errors import ParseError
from kitctl.models.package import ScoopItem
from kitctl.models.sources import ManagerId, Platform
from kitctl.utils.shell import CommandResult


class TestScoopAdapter:
    """Tests for ScoopAdapter class."""

    def test_source_is_scoop(self, fake_runner: MagicMock) -> None:
        """Adapter returns Scoop as source."""
        assert ScoopAdapter(fake_runner).source == ManagerId.SCOOP

    def test_windows_export_goes_through_powershell(
        self, fake_runner: MagicMock, mock_scoop_export: str
    ) -> None:
        """On Windows scoop is invoked as a PowerShell command."""
        fake_runner.run.return_value = CommandResult(
            stdout=mock_scoop_export, stderr="", returncode=0
        )

        ScoopAdapter(fake_runner, platform=Platform.WIN32).scan()

        fake_runner.run.assert_called_with(["powershell", "-Command", "scoop export"])

    def test_non_windows_export_runs_directly(
        self, fake_runner: MagicMock, mock_scoop_export: str
    ) -> None:
        """Elsewhere scoop is run directly."""
        fake_runner.run.return_value = CommandResult(
            stdout=mock_scoop_export, stderr="", returncode=0
        )

        ScoopAdapter(fake_runner, platform=Platform.LINUX).scan()

        fake_runner.run.assert_called_once_with(["scoop", "export"])

    def test_windows_availability_checks_scoop_version(self, fake_runner: MagicMock) -> None:
        """On Windows scoop must also answer --version."""
        fake_runner.run.return_value = CommandResult(stdout="", stderr="", returncode=1)
        assert ScoopAdapter(fake_runner, platform=Platform.WIN32).is_available() is False

    def test_unavailable_without_scoop_on_path(self, fake_runner: MagicMock) -> None:
        """A missing scoop is unavailable without running anything."""
        fake_runner.exists.return_value = False
        assert ScoopAdapter(fake_runner, platform=Platform.WIN32).is_available() is False
        fake_runner.run.assert_not_called()

    def test_install_command(self, fake_runner: MagicMock) -> None:
        """Installs run scoop install."""
        assert ScoopAdapter(fake_runner).build_install_command("git").line == "scoop install git"


class TestParseScoopExport:
    """Tests for parse_scoop_export function."""

    def test_parses_named_apps(self, mock_scoop_export: str) -> None:
        """Apps with a name become records; unnamed ones are dropped."""
        records = parse_scoop_export(mock_scoop_export)
        assert records == [
            ScoopItem(name="git", version="2.43.0", source="main"),
            ScoopItem(name="7zip", version="23.01", source="main"),
        ]

    def test_blank_output(self, mock_empty_output: str) -> None:
        """Blank output means nothing is installed."""
        assert parse_scoop_export(mock_empty_output) == []

    def test_missing_version_defaults_to_latest(self) -> None:
        """A missing version is recorded as latest."""
        records = parse_scoop_export('{"apps": [{"Name": "jq"}]}')
        assert records[0].version == "latest"  # type: ignore[attr-defined]

    def test_invalid_json_raises(self) -> None:
        """Output that is not JSON is a parse error."""
        with pytest.raises(ParseError, match="invalid JSON"):
            parse_scoop_export("ERROR: scoop is broken")

    def test_non_object_raises(self) -> None:
        """A JSON document that is not an object is a parse error."""
        with pytest.raises(ParseError):
            parse_scoop_export("[]")

    def test_malformed_entries_skipped(self) -> None:
        """Apps whose fields have the wrong type are dropped."""
        output = '{"apps": [{"Name": "git", "Version": 2.4}, {"Name": "jq", "Version": "1.7"}]}'
        assert parse_scoop_export(output) == [ScoopItem(name="jq", version="1.7")]

    def test_list_installed_with_malformed_entry(self, fake_runner: MagicMock) -> None:
        """A listing with only malformed apps is empty rather than an error."""
        fake_runner.run.return_value = CommandResult(
            stdout='{"apps": [{"Name": "git", "Version": 2.4}]}', stderr="", returncode=0
        )
        adapter = ScoopAdapter(fake_runner, platform=Platform.LINUX)
        assert adapter.list_installed() == []
