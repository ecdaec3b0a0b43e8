"""Unit tests for shell execution utilities."""

import subprocess
from unittest.mock import MagicMock, patch

from kitctl.utils.shell import (
    EXIT_NOT_FOUND,
    EXIT_OS_ERROR,
    EXIT_TIMEOUT,
    CommandResult,
    CommandRunner,
    command_exists,
    run_command,
)


class TestCommandResult:
    """Tests for CommandResult."""

    def test_success(self) -> None:
        """Exit status 0 is success."""
        assert CommandResult(stdout="", stderr="", returncode=0).success
        assert not CommandResult(stdout="", stderr="", returncode=1).success


class TestRunCommand:
    """Tests for run_command."""

    @patch("kitctl.utils.shell.subprocess.run")
    def test_captures_output(self, mock_run: MagicMock) -> None:
        """stdout, stderr and the exit code are returned."""
        mock_run.return_value = MagicMock(stdout="out", stderr="err", returncode=3)

        result = run_command(["dpkg", "-l"])

        assert result == CommandResult(stdout="out", stderr="err", returncode=3)

    @patch("kitctl.utils.shell.subprocess.run")
    def test_decodes_as_utf8(self, mock_run: MagicMock) -> None:
        """Output is decoded as UTF-8 with replacement, never raising."""
        mock_run.return_value = MagicMock(stdout="", stderr="", returncode=0)

        run_command(["winget", "show", "x"], timeout=5, cwd="/tmp")

        kwargs = mock_run.call_args.kwargs
        assert kwargs["encoding"] == "utf-8"
        assert kwargs["errors"] == "replace"
        assert kwargs["check"] is False
        assert kwargs["timeout"] == 5
        assert kwargs["cwd"] == "/tmp"

    @patch("kitctl.utils.shell.subprocess.run")
    def test_none_output_becomes_empty(self, mock_run: MagicMock) -> None:
        """Missing streams are normalized to empty strings."""
        mock_run.return_value = MagicMock(stdout=None, stderr=None, returncode=0)

        result = run_command(["true"])

        assert result.stdout == ""
        assert result.stderr == ""

    @patch("kitctl.utils.shell.subprocess.run")
    def test_missing_program(self, mock_run: MagicMock) -> None:
        """A missing program is reported with the not-found sentinel."""
        mock_run.side_effect = FileNotFoundError("No such file: 'brew'")

        result = run_command(["brew", "list"])

        assert result.returncode == EXIT_NOT_FOUND
        assert "brew" in result.stderr

    @patch("kitctl.utils.shell.subprocess.run")
    def test_timeout(self, mock_run: MagicMock) -> None:
        """A timeout is reported with the timeout sentinel."""
        mock_run.side_effect = subprocess.TimeoutExpired(cmd=["winget"], timeout=1)

        result = run_command(["winget", "search", "x"], timeout=1)

        assert result.returncode == EXIT_TIMEOUT

    @patch("kitctl.utils.shell.subprocess.run")
    def test_os_error(self, mock_run: MagicMock) -> None:
        """Other start failures are reported with their own sentinel."""
        mock_run.side_effect = PermissionError("denied")

        result = run_command(["/opt/tool"])

        assert result.returncode == EXIT_OS_ERROR
        assert result.stderr == "denied"


class TestCommandExists:
    """Tests for command_exists."""

    @patch("kitctl.utils.shell.shutil.which")
    def test_found(self, mock_which: MagicMock) -> None:
        """A resolvable command exists."""
        mock_which.return_value = "/usr/bin/snap"
        assert command_exists("snap")

    @patch("kitctl.utils.shell.shutil.which")
    def test_not_found(self, mock_which: MagicMock) -> None:
        """An unresolvable command does not exist."""
        mock_which.return_value = None
        assert not command_exists("snap")


class TestCommandRunner:
    """Tests for CommandRunner."""

    @patch("kitctl.utils.shell.run_command")
    def test_run_applies_timeout(self, mock_run_command: MagicMock) -> None:
        """The runner's timeout is passed to every command."""
        mock_run_command.return_value = CommandResult(stdout="", stderr="", returncode=0)

        CommandRunner(timeout=30).run(["flatpak", "list"])

        mock_run_command.assert_called_once_with(["flatpak", "list"], timeout=30)

    @patch("kitctl.utils.shell.sys")
    def test_run_in_wsl_off_windows(self, mock_sys: MagicMock) -> None:
        """Without WSL nothing is spawned and a not-found result comes back."""
        mock_sys.platform = "linux"
        runner = CommandRunner()

        with patch("kitctl.utils.shell.run_command") as mock_run_command:
            result = runner.run_in_wsl(["code", "--list-extensions"])

        assert result.returncode == EXIT_NOT_FOUND
        mock_run_command.assert_not_called()

    @patch("kitctl.utils.shell.command_exists", return_value=True)
    @patch("kitctl.utils.shell.sys")
    def test_run_in_wsl_wraps_command(
        self, mock_sys: MagicMock, _mock_exists: MagicMock
    ) -> None:
        """Inside WSL the command is prefixed with wsl --."""
        mock_sys.platform = "win32"
        runner = CommandRunner()

        with patch("kitctl.utils.shell.run_command") as mock_run_command:
            mock_run_command.return_value = CommandResult(stdout="", stderr="", returncode=0)
            runner.run_in_wsl(["code", "--list-extensions"])

        mock_run_command.assert_called_once_with(
            ["wsl", "--", "code", "--list-extensions"], timeout=None
        )
