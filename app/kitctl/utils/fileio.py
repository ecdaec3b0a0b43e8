"""JSON file helpers shared by the snapshot store and the name cache."""

import json
import logging
import os
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

logger = logging.getLogger(__name__)


def read_json(path: Path, default: Any = None) -> Any:
    """Read a JSON document, returning ``default`` when absent or corrupt.

    A corrupt file is logged rather than raised: callers treat it the same
    way as a file that was never written.

    Args:
        path: File to read.
        default: Value returned when the file cannot be used.

    Returns:
        The decoded document or ``default``.
    """
    if not path.exists():
        return default
    try:
        with path.open(encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        logger.warning("Ignoring corrupt JSON file %s: %s", path, e)
    except OSError as e:
        logger.warning("Failed to read %s: %s", path, e)
    return default


def write_json_atomic(path: Path, data: Any) -> Path:
    """Write a JSON document atomically.

    The document is written to a temporary file in the target directory
    and then moved into place with os.replace(), so readers never see a
    partially written file.

    Args:
        path: Destination file. Parent directories are created.
        data: JSON-serializable document.

    Returns:
        The destination path.

    Raises:
        OSError: If the file cannot be written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
        os.replace(str(tmp_path), str(path))
    except Exception:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise

    return path
