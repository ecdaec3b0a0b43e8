"""Shell execution utilities.

Provides subprocess execution that reports every failure through a
CommandResult instead of raising, plus a CommandRunner object that
adapters and services receive so tests can substitute it.
"""

import logging
import shutil
import subprocess
import sys
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Sentinel exit codes for failures that happen before the program runs
EXIT_TIMEOUT = 124
EXIT_OS_ERROR = 126
EXIT_NOT_FOUND = 127


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0


def _resolve_program(args: list[str]) -> list[str]:
    """Resolve the program through PATH on Windows so .cmd shims can run."""
    if sys.platform != "win32" or not args:
        return args
    resolved = shutil.which(args[0])
    if resolved is None:
        return args
    return [resolved, *args[1:]]


def run_command(
    args: list[str],
    *,
    timeout: float | None = None,
    cwd: str | None = None,
) -> CommandResult:
    """Execute a command and return the result.

    Never raises for a missing program, an OS-level failure or a timeout:
    those are reported with a sentinel exit code and the error text in
    stderr.

    Args:
        args: Command and arguments to execute.
        timeout: Maximum time in seconds to wait for command. None waits forever.
        cwd: Working directory for the command. If None, uses current directory.

    Returns:
        CommandResult with stdout, stderr, and returncode.
    """
    try:
        result = subprocess.run(
            _resolve_program(args),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout,
            cwd=cwd,
        )
    except FileNotFoundError as e:
        logger.debug("Command not found: %s", args[0] if args else "")
        return CommandResult(stdout="", stderr=str(e), returncode=EXIT_NOT_FOUND)
    except subprocess.TimeoutExpired as e:
        logger.warning("Command timed out after %ss: %s", timeout, " ".join(args))
        return CommandResult(stdout="", stderr=str(e), returncode=EXIT_TIMEOUT)
    except OSError as e:
        logger.warning("Command could not be started: %s (%s)", " ".join(args), e)
        return CommandResult(stdout="", stderr=str(e), returncode=EXIT_OS_ERROR)

    return CommandResult(
        stdout=result.stdout or "",
        stderr=result.stderr or "",
        returncode=result.returncode,
    )


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH.

    Args:
        name: Command name to check.

    Returns:
        True if command exists, False otherwise.
    """
    return shutil.which(name) is not None


class CommandRunner:
    """Runs external programs on behalf of adapters and services.

    A thin object over :func:`run_command` and :func:`command_exists`.
    The WSL variant wraps the command in ``wsl -- ...`` and is only
    meaningful on Windows hosts.

    Example:
        >>> runner = CommandRunner()
        >>> if runner.exists("flatpak"):
        ...     print(runner.run(["flatpak", "--version"]).stdout)
    """

    def __init__(self, timeout: float | None = None) -> None:
        """Initialize the runner.

        Args:
            timeout: Timeout applied to every command. None waits forever.
        """
        self._timeout = timeout

    def run(self, args: list[str]) -> CommandResult:
        """Run a command and capture its output."""
        logger.debug("Running: %s", " ".join(args))
        return run_command(args, timeout=self._timeout)

    def exists(self, name: str) -> bool:
        """Check whether an executable is resolvable through PATH."""
        return command_exists(name)

    def wsl_available(self) -> bool:
        """Check whether WSL can be used from this host."""
        return sys.platform == "win32" and command_exists("wsl")

    def run_in_wsl(self, args: list[str]) -> CommandResult:
        """Run a command inside the default WSL distribution's shell.

        Returns a not-found result without spawning anything when WSL is
        not available on this host.
        """
        if not self.wsl_available():
            return CommandResult(
                stdout="",
                stderr="WSL is not available on this host",
                returncode=EXIT_NOT_FOUND,
            )
        return self.run(["wsl", "--", *args])
