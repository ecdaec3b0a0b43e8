"""Path management for kitctl.

Provides XDG-compliant application directories and the path template
resolver used to locate editor settings and auxiliary config files.

XDG defaults:
- Config: ~/.config/kitctl/
- Cache: ~/.cache/kitctl/
"""

import ntpath
import os
import posixpath
import re
from collections.abc import Mapping
from pathlib import Path

from kitctl.models.sources import Platform

# Application identifier for directory naming
APP_NAME = "kitctl"

_WINDOWS_VAR = re.compile(r"%([^%]+)%")
_POSIX_VAR = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}|\$([A-Za-z_][A-Za-z0-9_]*)")


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/kitctl/ (or XDG_CONFIG_HOME/kitctl/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_cache_dir() -> Path:
    """Get the cache directory path.

    Returns:
        Path to ~/.cache/kitctl/ (or XDG_CACHE_HOME/kitctl/).
    """
    return _get_xdg_dir("XDG_CACHE_HOME", ".cache")


def get_config_path() -> Path:
    """Get the application config file path.

    Returns:
        Path to ~/.config/kitctl/config.toml.
    """
    return get_config_dir() / "config.toml"


def resolve_env_path(
    template: str,
    platform: Platform | None = None,
    env: Mapping[str, str] | None = None,
    home: str | None = None,
) -> str:
    """Expand environment variables and a leading ``~`` in a path template.

    Windows templates use ``%VAR%``; other platforms use ``$VAR`` and
    ``${VAR}``. A variable that is not set is left in place literally so
    that a later existence check simply finds nothing. The result is
    normalized with the target platform's separator conventions.

    Args:
        template: Path template such as ``%APPDATA%\\Code\\User`` or ``~/.config``.
        platform: Platform whose conventions apply. Defaults to the current one.
        env: Environment to read variables from. Defaults to ``os.environ``.
        home: Home directory for ``~``. Defaults to the current user's home.

    Returns:
        The resolved, normalized path string.
    """
    platform = platform or Platform.current()
    env = os.environ if env is None else env
    flavour = ntpath if platform is Platform.WIN32 else posixpath

    if platform is Platform.WIN32:
        resolved = _WINDOWS_VAR.sub(lambda m: env.get(m.group(1)) or m.group(0), template)
    else:
        resolved = _POSIX_VAR.sub(
            lambda m: env.get(m.group(1) or m.group(2)) or m.group(0),
            template,
        )

    if resolved == "~" or resolved.startswith(("~/", "~\\")):
        home_dir = home if home is not None else str(Path.home())
        rest = resolved[2:]
        resolved = flavour.join(home_dir, rest) if rest else home_dir

    return flavour.normpath(resolved)
