"""Unit tests for status command."""

import json
from datetime import UTC, datetime

from kitctl.cli.main import app
from kitctl.core.inventory import Inventory
from kitctl.models.sources import ConfigAppId, ManagerId
from typer.testing import CliRunner

runner = CliRunner()


class TestStatusCommand:
    """Tests for kitctl status."""

    def test_json(self, inventory: Inventory) -> None:
        """JSON output maps backed-up sources to ISO timestamps."""
        inventory.store.mark_backed_up([ManagerId.APT], datetime(2024, 2, 5, 9, 30, tzinfo=UTC))

        result = runner.invoke(app, ["status", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"apt": "2024-02-05T09:30:00+00:00"}

    def test_table(self, inventory: Inventory) -> None:
        """Every platform source is listed; unknown ones as never."""
        inventory.store.mark_backed_up([ManagerId.APT], datetime(2024, 2, 5, 9, 30, tzinfo=UTC))

        result = runner.invoke(app, ["status"])

        assert result.exit_code == 0
        assert "2024-02-05 09:30" in result.stdout
        assert "never" in result.stdout
        assert "Flatpak" in result.stdout

    def test_config_apps_listed(self, inventory: Inventory) -> None:
        """Config apps of this platform appear next to the sources."""
        inventory.store.mark_backed_up([ConfigAppId.GIT], datetime(2024, 3, 1, 8, 0, tzinfo=UTC))

        result = runner.invoke(app, ["status"])

        assert result.exit_code == 0
        assert "2024-03-01 08:00" in result.stdout
        assert "Zsh" in result.stdout
        assert "Windows Terminal" not in result.stdout

    def test_without_backup_directory(self, unconfigured_inventory: Inventory) -> None:
        """Status needs a backup directory."""
        result = runner.invoke(app, ["status"])

        assert result.exit_code == 1
        assert "set-backup-dir" in result.output
