"""Unit tests for CLI display helpers."""

from pathlib import Path

from kitctl.cli.display import (
    create_outcomes_table,
    create_reconciled_table,
    create_records_table,
    print_backup_report,
    print_outcomes_summary,
)
from kitctl.core.theme import get_theme
from kitctl.models.action import BackupReport, InstallCommand, InstallOutcome
from kitctl.models.merge import MergedItem, Provenance
from kitctl.models.package import AptItem, WingetItem
from kitctl.models.sources import ManagerId
from rich.console import Console


def _render(renderable) -> str:
    console = Console(theme=get_theme(), width=120)
    with console.capture() as capture:
        console.print(renderable)
    return capture.get()


class TestRecordsTable:
    """Tests for create_records_table."""

    def test_rows(self) -> None:
        """One row per record."""
        table = create_records_table(
            [AptItem(package="curl", version="8.5.0"), AptItem(package="git", version="2.43")],
            "Installed (APT)",
        )
        assert table.row_count == 2

    def test_name_shown_when_different(self) -> None:
        """Display names distinct from the id are shown."""
        text = _render(
            create_records_table([WingetItem(package_id="Git.Git", name="Git")], "Winget")
        )
        assert "Git.Git" in text
        assert "latest" in text


class TestReconciledTable:
    """Tests for create_reconciled_table."""

    def test_rows_and_status(self) -> None:
        """Each item is rendered with its status."""
        items = [
            MergedItem("curl", "curl", "8.5.0", True, Provenance.BOTH),
            MergedItem("htop", "htop", None, False, Provenance.BACKUP_ONLY),
        ]

        table = create_reconciled_table(items, "APT")

        assert table.row_count == 2
        assert "htop" in _render(table)


class TestOutcomes:
    """Tests for outcome rendering."""

    def test_table_marks_failures(self) -> None:
        """Failed installs show FAIL with their error."""
        command = InstallCommand(program="snap", args=("install", "jq"))
        outcomes = [
            InstallOutcome(identifier="jq", command=command, success=True, exit_code=0),
            InstallOutcome(
                identifier="nope", command=command, success=False, exit_code=1, error="not found"
            ),
        ]

        text = _render(create_outcomes_table(outcomes))

        assert "OK" in text
        assert "FAIL" in text
        assert "not found" in text

    def test_summary_success(self, capsys) -> None:
        """All-good summaries go to stdout."""
        command = InstallCommand(program="snap", args=("install", "jq"))
        print_outcomes_summary(
            [InstallOutcome(identifier="jq", command=command, success=True, exit_code=0)]
        )
        assert "1 installed" in capsys.readouterr().out


class TestBackupReport:
    """Tests for print_backup_report."""

    def test_lists_paths_and_sources(self, capsys) -> None:
        """Written files and per-source status are printed."""
        report = BackupReport(
            written_paths=(Path("/kit/apt.json"),),
            succeeded_ids=(ManagerId.APT,),
            failed={ManagerId.SNAP: "snap missing"},
        )

        print_backup_report(report)

        out = capsys.readouterr().out
        assert "/kit/apt.json" in out
        assert "APT" in out
        assert "snap missing" in out
