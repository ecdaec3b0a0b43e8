"""Reconciled view of installed and backed-up items."""

from dataclasses import dataclass
from enum import Enum


class Provenance(Enum):
    """Where a merged item was seen.

    Attributes:
        INSTALLED: Only in the live listing.
        BACKUP_ONLY: Only in the backup snapshot. Candidate for restore.
        BOTH: In the live listing and the backup snapshot.
    """

    INSTALLED = "installed"
    BACKUP_ONLY = "backup"
    BOTH = "both"


@dataclass(frozen=True, slots=True)
class MergedItem:
    """One row of the reconciled inventory.

    Attributes:
        id: Identity value of the item for its source.
        display_name: Name shown to the user (live copy wins when both exist).
        version: Version from the same copy as the display name.
        is_installed: True iff the identity was present in the live listing.
        provenance: Which side(s) the identity was seen on.
    """

    id: str
    display_name: str
    version: str | None
    is_installed: bool
    provenance: Provenance

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.display_name,
            "version": self.version,
            "is_installed": self.is_installed,
            "source": self.provenance.value,
        }
