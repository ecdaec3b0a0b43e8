"""Action models for restore and backup operations.

This module defines the install commands synthesized for a restore, the
request that drives a restore, and the per-item and per-source results of
restore and backup batches.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from kitctl.errors import ConfigurationError
from kitctl.models.sources import BackupTarget, SourceId


@dataclass(frozen=True, slots=True)
class InstallCommand:
    """A directly executable install command.

    Attributes:
        program: Executable to run (may be an elevation prefix such as sudo).
        args: Arguments passed to the program.
    """

    program: str
    args: tuple[str, ...]

    @property
    def argv(self) -> list[str]:
        """Program and arguments as one list."""
        return [self.program, *self.args]

    @property
    def line(self) -> str:
        """Space-joined command line used in scripts and previews."""
        return " ".join(self.argv)


@dataclass(frozen=True, slots=True)
class RestoreRequest:
    """Items to re-install for one manager or host app.

    Attributes:
        target: Manager or host app that installs the items.
        identifiers: Identity values, in the order they should be installed.
        versions: Optional versions keyed by identifier.
    """

    target: SourceId
    identifiers: tuple[str, ...]
    versions: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate request data after initialization."""
        if not self.identifiers:
            msg = f"Restore request for {self.target.value} has no identifiers"
            raise ConfigurationError(msg)
        if any(not ident.strip() for ident in self.identifiers):
            msg = f"Restore request for {self.target.value} contains a blank identifier"
            raise ConfigurationError(msg)

    def version_of(self, identifier: str) -> str | None:
        """Requested version for an identifier, if any."""
        return self.versions.get(identifier) or None


@dataclass(frozen=True, slots=True)
class InstallOutcome:
    """Result of running one install command.

    Attributes:
        identifier: Item that was installed.
        command: Command that was run.
        success: Whether the command exited with status 0.
        exit_code: Exit status of the command.
        error: Error text when the command failed.
    """

    identifier: str
    command: InstallCommand
    success: bool
    exit_code: int
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the install failed."""
        return not self.success


@dataclass(frozen=True, slots=True)
class BackupReport:
    """Aggregate result of a backup batch.

    Attributes:
        written_paths: Every file written, grouped by target in request order.
        succeeded_ids: Sources or config apps whose backup completed.
        failed: Error message per target whose backup failed.
    """

    written_paths: tuple[Path, ...]
    succeeded_ids: tuple[BackupTarget, ...]
    failed: dict[BackupTarget, str] = field(default_factory=dict)

    @property
    def all_succeeded(self) -> bool:
        """True when no source failed."""
        return not self.failed

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "written": [str(p) for p in self.written_paths],
            "succeeded": [s.value for s in self.succeeded_ids],
            "failed": {s.value: msg for s, msg in self.failed.items()},
        }
