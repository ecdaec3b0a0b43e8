"""Console color theme.

The bundled ``data/theme.toml`` defines every color; a ``theme.toml`` in
the kitctl config directory may override any subset of them under
``[colors]``. Colors are validated as hex codes before they reach Rich.
"""

import functools
import logging
import tomllib
from importlib import resources
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints, ValidationError
from rich.theme import Theme

from kitctl.core.paths import get_config_dir

logger = logging.getLogger(__name__)

THEME_FILENAME = "theme.toml"

HexColor = Annotated[
    str,
    StringConstraints(strip_whitespace=True, pattern=r"^#(?:[0-9a-fA-F]{3}){1,2}$"),
]


class ThemeColors(BaseModel):
    """Named colors used by kitctl's tables and messages.

    The provenance colors (``installed``, ``backup_only``, ``both``) style
    the rows of a reconciled view.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    text: HexColor = "#ffffff"
    muted: HexColor = "#b2bec3"
    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"

    success: HexColor = "#03b971"
    warning: HexColor = "#f5b332"
    error: HexColor = "#f53263"
    info: HexColor = "#0ec1c8"

    installed: HexColor = "#69B9A1"
    backup_only: HexColor = "#f5b332"
    both: HexColor = "#0e8ac8"


def get_user_theme_path() -> Path:
    """Path of the optional user override, next to config.toml."""
    return get_config_dir() / THEME_FILENAME


def _read_colors(text: str, origin: str) -> dict[str, str]:
    """Extract the string values of the ``[colors]`` table.

    Args:
        text: TOML document.
        origin: Where the document came from, for log messages.

    Returns:
        Color name to value; empty when the document is unusable.
    """
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        logger.warning("Ignoring theme %s: %s", origin, e)
        return {}

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme %s: [colors] is not a table", origin)
        return {}
    return {key: value for key, value in colors.items() if isinstance(value, str)}


def load_bundled_colors() -> dict[str, str]:
    """Colors shipped in the package's data/theme.toml."""
    text = resources.files("kitctl.data").joinpath(THEME_FILENAME).read_text(encoding="utf-8")
    return _read_colors(text, "bundled theme")


def load_user_colors(path: Path | None = None) -> dict[str, str]:
    """Colors from the user override; empty when there is none."""
    path = path or get_user_theme_path()
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as e:
        logger.warning("Failed to read theme %s: %s", path, e)
        return {}
    return _read_colors(text, str(path))


def load_theme() -> ThemeColors:
    """Merge the user override over the bundled colors.

    An override that fails validation is ignored as a whole and the
    built-in defaults are used.
    """
    user = load_user_colors()
    try:
        return ThemeColors.model_validate({**load_bundled_colors(), **user})
    except ValidationError as e:
        logger.warning("Invalid theme colors, using defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme, adding the composite styles tables use."""
    colors = colors or load_theme()
    styles = colors.model_dump()
    styles.update(
        {
            "error": f"bold {colors.error}",
            "installed": f"bold {colors.installed}",
            "bold_header": f"bold {colors.header}",
            "dim": colors.muted,
        }
    )
    return Theme(styles)


@functools.cache
def get_theme() -> Theme:
    """Rich theme shared by the stdout and stderr consoles."""
    return get_rich_theme()
