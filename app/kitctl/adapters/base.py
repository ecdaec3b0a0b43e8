"""Abstract base class for source adapters.

This module defines the Adapter interface that every package manager and
host-app integration implements: detection, listing of installed items
and synthesis of an install command for one identifier.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from pydantic import ValidationError

from kitctl.errors import ExecutionError, ParseError, SourceError, SourceUnavailableError
from kitctl.models.action import InstallCommand
from kitctl.models.package import PackageRecord
from kitctl.models.sources import SourceId
from kitctl.utils.shell import CommandResult, CommandRunner

logger = logging.getLogger(__name__)


class Adapter(ABC):
    """Abstract base class for all source adapters.

    Adapters query one package manager or host app and normalize its
    output into records. ``scan`` is strict and raises on any failure;
    ``list_installed`` is the lenient form used by batch operations and
    degrades every failure to an empty list.

    Example:
        >>> adapter = AptAdapter()
        >>> if adapter.is_available():
        ...     for record in adapter.list_installed():
        ...         print(f"{record.identity}: {record.version}")
    """

    def __init__(self, runner: CommandRunner | None = None) -> None:
        """Initialize the adapter.

        Args:
            runner: Command runner used for every external call.
        """
        self._runner = runner or CommandRunner()

    @property
    def runner(self) -> CommandRunner:
        """Command runner used by this adapter."""
        return self._runner

    @property
    @abstractmethod
    def source(self) -> SourceId:
        """Return the source this adapter handles."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this source's CLI can be used on the system.

        Returns:
            True if the CLI is resolvable, False otherwise.
        """

    @abstractmethod
    def _collect(self) -> list[PackageRecord]:
        """Run the listing command and parse its output.

        Raises:
            ExecutionError: If the listing command fails.
            ParseError: If the output cannot be understood.
        """

    @abstractmethod
    def build_install_command(self, identifier: str, version: str | None = None) -> InstallCommand:
        """Build the command that installs one item.

        Pure function: performs no I/O.

        Args:
            identifier: Identity value of the item.
            version: Optional version to pin, where the manager supports it.

        Returns:
            InstallCommand for the item.
        """

    def scan(self) -> list[PackageRecord]:
        """List installed items, raising on any failure.

        Returns:
            Records for every installed item. Empty output yields an empty list.

        Raises:
            SourceUnavailableError: If the source is not available.
            ExecutionError: If the listing command fails.
            ParseError: If the output cannot be parsed.
        """
        if not self.is_available():
            msg = f"{self.source.label} is not available on this system"
            raise SourceUnavailableError(msg)
        try:
            return self._collect()
        except ValidationError as e:
            msg = f"{self.source.label} listing has an unexpected shape: {e}"
            raise ParseError(msg) from e

    def list_installed(self) -> list[PackageRecord]:
        """List installed items, degrading any failure to an empty list.

        The cause of a failure is logged so a batch operation can carry on
        with other sources.
        """
        try:
            return self.scan()
        except SourceError as e:
            logger.warning("Listing %s failed: %s", self.source.value, e)
            return []

    def _run_checked(self, args: list[str]) -> CommandResult:
        """Run a command and raise ExecutionError on non-zero exit."""
        result = self._runner.run(args)
        if not result.success:
            detail = result.stderr.strip() or result.stdout.strip() or "no output"
            msg = f"{' '.join(args[:3])} failed (exit {result.returncode}): {detail}"
            raise ExecutionError(msg)
        return result


def split_lines(output: str) -> list[str]:
    """Split command output into non-blank lines."""
    return [line for line in output.splitlines() if line.strip()]


def elevated(prefix: str | None, argv: Sequence[str]) -> InstallCommand:
    """Build an InstallCommand, prefixed with an elevation command if given."""
    if prefix:
        return InstallCommand(program=prefix, args=tuple(argv))
    return InstallCommand(program=argv[0], args=tuple(argv[1:]))
