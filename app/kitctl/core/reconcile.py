"""Reconciliation engine for live and backed-up inventories.

This module merges the items installed right now with the items recorded
in a backup snapshot into one deduplicated, deterministically ordered
view. Each merged item says whether it is installed and on which side(s)
it was seen.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

from kitctl.models.merge import MergedItem, Provenance
from kitctl.models.package import PackageRecord

T = TypeVar("T")


def merge(
    installed: Iterable[T],
    backed_up: Iterable[T],
    identity_of: Callable[[T], str],
    name_of: Callable[[T], str],
    version_of: Callable[[T], str | None],
) -> list[MergedItem]:
    """Merge a live listing with a backup snapshot.

    Every identity from either side appears exactly once. When an identity
    is on both sides the installed copy supplies the name and version. If
    one side lists an identity twice, the later entry replaces the earlier.

    Ordering: installed items first, then by display name compared
    case-insensitively, with the exact name and the identity as tie
    breakers so the result never depends on input order.

    Args:
        installed: Items currently installed.
        backed_up: Items from the backup snapshot.
        identity_of: Returns the identity value of an item.
        name_of: Returns the display name of an item.
        version_of: Returns the version of an item, if known.

    Returns:
        Merged items, sorted.
    """
    live = {identity_of(item): item for item in installed}
    saved = {identity_of(item): item for item in backed_up}

    merged: list[MergedItem] = []
    for identity in live.keys() | saved.keys():
        if identity in live:
            item = live[identity]
            provenance = Provenance.BOTH if identity in saved else Provenance.INSTALLED
            is_installed = True
        else:
            item = saved[identity]
            provenance = Provenance.BACKUP_ONLY
            is_installed = False

        merged.append(
            MergedItem(
                id=identity,
                display_name=name_of(item) or identity,
                version=version_of(item),
                is_installed=is_installed,
                provenance=provenance,
            )
        )

    merged.sort(key=_sort_key)
    return merged


def _sort_key(item: MergedItem) -> tuple[bool, str, str, str]:
    return (not item.is_installed, item.display_name.casefold(), item.display_name, item.id)


def merge_records(
    installed: Iterable[PackageRecord],
    backed_up: Iterable[PackageRecord],
) -> list[MergedItem]:
    """Merge two record lists using the records' own accessors."""
    return merge(
        installed,
        backed_up,
        identity_of=lambda record: record.identity,
        name_of=lambda record: record.display_name,
        version_of=record_version,
    )


def record_version(record: PackageRecord) -> str | None:
    """Version of a record, or None when unknown."""
    # Every record variant declares a version field; "" means unknown
    return record.version or None  # type: ignore[attr-defined]


def split_actionable(items: Sequence[MergedItem]) -> tuple[list[str], list[str]]:
    """Split a merged view into what can be backed up and what can be restored.

    Returns:
        Tuple of (ids eligible for backup, ids eligible for restore).
    """
    backup_ids = [item.id for item in items if item.is_installed]
    restore_ids = [item.id for item in items if not item.is_installed]
    return backup_ids, restore_ids
