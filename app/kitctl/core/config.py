"""Application configuration I/O.

This module provides the AppConfig model and functions for loading and
saving it as TOML with validation through Pydantic.
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from kitctl.core.paths import get_config_path
from kitctl.errors import ConfigurationError


class AppConfig(BaseModel):
    """Persistent kitctl settings.

    Attributes:
        backup_directory: Root directory for snapshots. Unset until chosen.
        elevation_command: Prefix for managers that need root (apt, dnf, ...).
        name_workers: Parallel display-name lookups during a winget listing.
        backup_workers: Sources backed up in parallel by ``backup``.
    """

    model_config = ConfigDict(extra="forbid")

    backup_directory: Annotated[
        Path | None, Field(description="Root directory for backup snapshots")
    ] = None
    elevation_command: Annotated[
        str, Field(min_length=1, description="Command prefix used for privileged installs")
    ] = "sudo"
    name_workers: Annotated[int, Field(ge=1, le=32, description="Name lookup workers")] = 4
    backup_workers: Annotated[int, Field(ge=1, le=32, description="Backup workers")] = 4

    def require_backup_directory(self) -> Path:
        """Return the backup directory or fail when it was never chosen.

        Raises:
            ConfigurationError: If no backup directory is configured.
        """
        if self.backup_directory is None:
            msg = "Backup directory is not set. Run 'kitctl config set-backup-dir PATH' first."
            raise ConfigurationError(msg)
        return self.backup_directory.expanduser()


def load_config(path: Path | None = None) -> AppConfig:
    """Load and validate the application config.

    A missing file yields the defaults.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated AppConfig object.

    Raises:
        ConfigurationError: If the file cannot be read, parsed or validated.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        return AppConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read config {config_path}: {e}") from e

    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config content in {config_path}: {e}") from e


def save_config(config: AppConfig, path: Path | None = None) -> Path:
    """Save the application config as TOML.

    The file is written atomically through a temporary file in the same
    directory and os.replace().

    Args:
        config: The AppConfig to save.
        path: Target path. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigurationError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = _config_to_dict(config)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigurationError(f"Failed to write config: {e}") from e

    return config_path


def _config_to_dict(config: AppConfig) -> dict[str, Any]:
    """Convert an AppConfig to a TOML-serializable dictionary.

    TOML has no null, so an unset backup directory is simply omitted.
    """
    data: dict[str, Any] = {
        "elevation_command": config.elevation_command,
        "name_workers": config.name_workers,
        "backup_workers": config.backup_workers,
    }
    if config.backup_directory is not None:
        data["backup_directory"] = str(config.backup_directory)
    return data
