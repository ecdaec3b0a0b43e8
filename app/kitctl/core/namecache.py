"""Display-name resolution for winget packages.

``winget export`` lists package identifiers without human-readable names.
This module looks names up through secondary winget queries and keeps the
results in a persistent JSON cache so each identifier is resolved once.

Cache file layout (``<backup root>/cache/winget_cache.json``)::

    {
      "Git.Git": {
        "package_id": "Git.Git",
        "cached_at": "2026-01-01T00:00:00+00:00",
        "display_name": "Git"
      }
    }
"""

import logging
import re
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from pydantic import ValidationError

from kitctl.models.cache import DisplayNameCacheEntry
from kitctl.utils.fileio import read_json, write_json_atomic
from kitctl.utils.shell import CommandRunner

logger = logging.getLogger(__name__)

CACHE_FILENAME = "winget_cache.json"

# Called with (completed, total, identifier) after each resolution
ProgressCallback = Callable[[int, int, str], None]

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_LEADING_DECORATION = re.compile(r"^[-—\\/|*·•\s]+")
_FOUND_PREFIX = re.compile(r"^(?:見つかりました|Found)\s+", re.IGNORECASE)
_NAME_FIELD = re.compile(r"^(?:Name|名前)\s*:\s*(.+)$", re.IGNORECASE)
_TABLE_HEADER = re.compile(r"^(?:Name|名前)\s+(?:Id|ID)\s+", re.IGNORECASE)
_TABLE_SEPARATOR = re.compile(r"^[-=—]{2,}")
_COLUMN_GAP = re.compile(r"\s{2,}")


class DisplayNameCache:
    """Persistent identifier to display-name cache.

    One lock guards the whole document. ``put`` re-reads the file under
    the lock and merges the new entry into what is on disk before the
    atomic write, so concurrent writers for different identifiers never
    drop each other's entries.

    Attributes:
        path: Location of the cache file.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._lock = threading.Lock()
        self._entries: dict[str, DisplayNameCacheEntry] | None = None

    def get(self, package_id: str) -> DisplayNameCacheEntry | None:
        """Return the cached entry for an identifier, if any."""
        with self._lock:
            if self._entries is None:
                self._entries = self._read()
            return self._entries.get(package_id)

    def put(self, entry: DisplayNameCacheEntry) -> None:
        """Store an entry and persist the merged document.

        Raises:
            OSError: If the cache file cannot be written.
        """
        with self._lock:
            entries = self._read()
            entries[entry.package_id] = entry
            write_json_atomic(
                self.path,
                {key: value.model_dump(mode="json") for key, value in entries.items()},
            )
            self._entries = entries

    def _read(self) -> dict[str, DisplayNameCacheEntry]:
        """Load the document from disk, skipping unusable entries."""
        raw = read_json(self.path, default={})
        if not isinstance(raw, dict):
            logger.warning("Ignoring name cache %s: not a JSON object", self.path)
            return {}

        entries: dict[str, DisplayNameCacheEntry] = {}
        for key, value in raw.items():
            if isinstance(value, str):
                # Plain {"id": "name"} maps are accepted as well
                value = {"display_name": value}
            if not isinstance(value, dict):
                continue
            try:
                entry = DisplayNameCacheEntry.model_validate({"package_id": key, **value})
            except ValidationError as e:
                logger.debug("Skipping invalid cache entry %r: %s", key, e)
                continue
            entries[key] = entry
        return entries


class DisplayNameResolver:
    """Resolves winget identifiers to display names.

    Lookups try three winget queries in order (``show``, ``search`` and
    ``list``), each parsed tolerantly of English and Japanese output.
    When all of them fail, a name is derived from the identifier. Every
    result is cached before it is returned.

    Example:
        >>> resolver = DisplayNameResolver(cache=DisplayNameCache(path))
        >>> resolver.resolve("Git.Git")
        'Git'
    """

    def __init__(
        self,
        cache: DisplayNameCache,
        runner: CommandRunner | None = None,
        workers: int = 4,
    ) -> None:
        """Initialize the resolver.

        Args:
            cache: Persistent cache of resolved names.
            runner: Command runner used for winget queries.
            workers: Maximum parallel lookups in resolve_many().
        """
        self._cache = cache
        self._runner = runner or CommandRunner()
        self._workers = max(1, workers)
        self._id_locks: dict[str, threading.Lock] = {}
        self._id_locks_guard = threading.Lock()

    def resolve(self, package_id: str) -> str:
        """Return the display name for an identifier.

        Resolution of one identifier is atomic: a second caller for the
        same identifier waits and then gets the cached result.

        Args:
            package_id: Winget package identifier.

        Returns:
            The display name. Never empty.
        """
        with self._lock_for(package_id):
            cached = self._cache.get(package_id)
            if cached is not None:
                return cached.display_name

            name = self._query(package_id) or fallback_display_name(package_id)
            logger.debug("Resolved %s -> %s", package_id, name)
            try:
                self._cache.put(DisplayNameCacheEntry(package_id=package_id, display_name=name))
            except OSError as e:
                logger.warning("Failed to persist display name for %s: %s", package_id, e)
            return name

    def resolve_many(
        self,
        package_ids: Iterable[str],
        on_progress: ProgressCallback | None = None,
    ) -> list[str]:
        """Resolve several identifiers in parallel.

        Args:
            package_ids: Identifiers to resolve.
            on_progress: Called after each completed resolution.

        Returns:
            Display names in the same order as ``package_ids``.
        """
        ids = list(package_ids)
        names: list[str] = [""] * len(ids)
        if not ids:
            return names

        done = 0
        with ThreadPoolExecutor(max_workers=min(self._workers, len(ids))) as executor:
            futures = {executor.submit(self.resolve, pid): index for index, pid in enumerate(ids)}
            for future in as_completed(futures):
                index = futures[future]
                names[index] = future.result()
                done += 1
                if on_progress is not None:
                    on_progress(done, len(ids), ids[index])
        return names

    def _lock_for(self, package_id: str) -> threading.Lock:
        with self._id_locks_guard:
            return self._id_locks.setdefault(package_id, threading.Lock())

    def _query(self, package_id: str) -> str:
        """Run the winget lookups in order and return the first name found."""
        show = self._winget_stdout(["show", package_id])
        if show:
            name = parse_show_output(show, package_id)
            if name:
                return name

        for subcommand in ("search", "list"):
            output = self._winget_stdout([subcommand, "-e", "--id", package_id])
            if output:
                name = parse_table_output(output, package_id)
                if name:
                    return name
        return ""

    def _winget_stdout(self, args: list[str]) -> str:
        """Run a winget query, returning its normalized stdout or ''."""
        result = self._runner.run(["winget", *args, "--disable-interactivity"])
        if not result.success or not result.stdout:
            logger.debug("winget %s gave nothing (exit %d)", args[0], result.returncode)
            return ""
        return normalize_output(result.stdout)


def normalize_output(text: str) -> str:
    """Strip ANSI escapes and control characters from winget output.

    Carriage returns used by winget's progress spinner become newlines.
    """
    text = _ANSI_ESCAPE.sub("", text)
    text = text.replace("\r", "\n")
    return _CONTROL_CHARS.sub(" ", text)


def sanitize_candidate(text: str, package_id: str) -> str:
    """Clean up a candidate display name.

    Removes leading bullet and dash decoration, collapses whitespace,
    drops a localized "Found" prefix and a trailing ``[<id>]`` echo.
    """
    text = re.sub(r"[\r\n]+", " ", text)
    text = _LEADING_DECORATION.sub("", text)
    text = re.sub(r"\s+", " ", text).strip()
    text = _FOUND_PREFIX.sub("", text).strip()
    text = re.sub(rf"\s*\[{re.escape(package_id)}\]$", "", text).strip()
    return text


def parse_show_output(output: str, package_id: str) -> str:
    """Extract a name from ``winget show`` output.

    The first line carrying ``[<id>]`` wins, using the text before the
    bracket. Otherwise a ``Name:`` (or ``名前:``) field is used.

    Args:
        output: Normalized stdout of ``winget show``.
        package_id: Identifier that was queried.

    Returns:
        The candidate name, or '' when none was found.
    """
    marker = f"[{package_id}]"
    field_name = ""
    for raw in output.split("\n"):
        line = raw.strip()
        if marker in line:
            name = sanitize_candidate(line.split(marker, 1)[0], package_id)
            if name:
                return name
        match = _NAME_FIELD.match(line)
        if match and not field_name:
            field_name = sanitize_candidate(match.group(1), package_id)
    return field_name


def parse_table_output(output: str, package_id: str) -> str:
    """Extract a name from ``winget search`` or ``winget list`` tables.

    The data row is the first line mentioning the identifier that is not
    the header or a separator rule. Columns are separated by runs of two
    or more spaces and the first column is the name.

    Args:
        output: Normalized stdout of the query.
        package_id: Identifier that was queried.

    Returns:
        The candidate name, or '' when none was found.
    """
    for raw in output.split("\n"):
        line = raw.strip()
        if not line or package_id not in line:
            continue
        if _TABLE_HEADER.match(line) or _TABLE_SEPARATOR.match(line):
            continue
        return sanitize_candidate(_COLUMN_GAP.split(line)[0], package_id)
    return ""


def fallback_display_name(package_id: str) -> str:
    """Derive a name from the identifier: its last dot-separated segment."""
    return package_id.rsplit(".", 1)[-1] or package_id
