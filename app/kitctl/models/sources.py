"""Identifiers for package managers, extension host apps and config apps.

The enumerations are closed and carry the static facts the rest of the
application needs: which operating systems a source is meaningful on,
where its snapshot lives, and for host apps where their settings are.
"""

import sys
from dataclasses import dataclass, field
from enum import Enum

from kitctl.errors import ConfigurationError


class Platform(Enum):
    """Operating system families kitctl distinguishes."""

    WIN32 = "win32"
    DARWIN = "darwin"
    LINUX = "linux"

    @classmethod
    def current(cls) -> "Platform":
        """Return the platform of the running interpreter."""
        if sys.platform == "win32":
            return cls.WIN32
        if sys.platform == "darwin":
            return cls.DARWIN
        return cls.LINUX


_WIN = frozenset({Platform.WIN32})
_LINUX = frozenset({Platform.LINUX})


class ManagerId(Enum):
    """Package manager families."""

    WINGET = "winget"
    MSSTORE = "msstore"
    SCOOP = "scoop"
    CHOCOLATEY = "chocolatey"
    HOMEBREW = "homebrew"
    APT = "apt"
    YUM = "yum"
    DNF = "dnf"
    PACMAN = "pacman"
    ZYPPER = "zypper"
    SNAP = "snap"
    FLATPAK = "flatpak"

    @property
    def label(self) -> str:
        """Human-readable manager name."""
        return _MANAGER_LABELS[self]

    @property
    def platforms(self) -> frozenset[Platform]:
        """Operating systems on which this manager is meaningful."""
        return _MANAGER_PLATFORMS[self]

    @property
    def snapshot_filename(self) -> str:
        """File name of this manager's snapshot at the backup root."""
        return _SNAPSHOT_FILENAMES.get(self, f"{self.value}_packages.json")


_MANAGER_LABELS: dict[ManagerId, str] = {
    ManagerId.WINGET: "Winget",
    ManagerId.MSSTORE: "Microsoft Store",
    ManagerId.SCOOP: "Scoop",
    ManagerId.CHOCOLATEY: "Chocolatey",
    ManagerId.HOMEBREW: "Homebrew",
    ManagerId.APT: "APT",
    ManagerId.YUM: "YUM",
    ManagerId.DNF: "DNF",
    ManagerId.PACMAN: "Pacman",
    ManagerId.ZYPPER: "Zypper",
    ManagerId.SNAP: "Snap",
    ManagerId.FLATPAK: "Flatpak",
}

_MANAGER_PLATFORMS: dict[ManagerId, frozenset[Platform]] = {
    ManagerId.WINGET: _WIN,
    ManagerId.MSSTORE: _WIN,
    ManagerId.SCOOP: _WIN,
    ManagerId.CHOCOLATEY: _WIN,
    ManagerId.HOMEBREW: frozenset({Platform.DARWIN, Platform.LINUX}),
    ManagerId.APT: _LINUX,
    ManagerId.YUM: _LINUX,
    ManagerId.DNF: _LINUX,
    ManagerId.PACMAN: _LINUX,
    ManagerId.ZYPPER: _LINUX,
    ManagerId.SNAP: _LINUX,
    ManagerId.FLATPAK: _LINUX,
}

_SNAPSHOT_FILENAMES: dict[ManagerId, str] = {
    ManagerId.WINGET: "winget_packages.json",
    ManagerId.MSSTORE: "msstore_packages.json",
    ManagerId.SCOOP: "scoop_apps.json",
    ManagerId.CHOCOLATEY: "chocolatey_packages.json",
}


@dataclass(frozen=True, slots=True)
class HostAppDef:
    """Static description of an editor that exposes an extension CLI.

    Attributes:
        label: Human-readable application name.
        command: CLI command used to list and install extensions.
        darwin_app_name: Bundle name under /Applications on macOS, if any.
        settings_dirs: Per-platform template of the user settings directory.
        extra_files: Per-platform templates of auxiliary files (MCP config).
    """

    label: str
    command: str
    darwin_app_name: str | None
    settings_dirs: dict[Platform, str]
    extra_files: dict[Platform, tuple[str, ...]] = field(default_factory=dict)

    def darwin_binary(self) -> str | None:
        """Path of the CLI inside the macOS application bundle."""
        if self.darwin_app_name is None:
            return None
        return (
            f"/Applications/{self.darwin_app_name}.app/Contents/Resources/app/bin/{self.command}"
        )


def _editor_settings(folder: str) -> dict[Platform, str]:
    return {
        Platform.WIN32: f"%APPDATA%\\{folder}\\User",
        Platform.DARWIN: f"~/Library/Application Support/{folder}/User",
        Platform.LINUX: f"~/.config/{folder}/User",
    }


def _same_everywhere(win: str, posix: str) -> dict[Platform, tuple[str, ...]]:
    return {
        Platform.WIN32: (win,),
        Platform.DARWIN: (posix,),
        Platform.LINUX: (posix,),
    }


class HostAppId(Enum):
    """Editors whose extensions kitctl backs up and restores."""

    VSCODE = "vscode"
    CURSOR = "cursor"
    ANTIGRAVITY = "antigravity"
    VOIDEDITOR = "voideditor"

    @property
    def definition(self) -> HostAppDef:
        """Static definition of this host app."""
        return HOST_APP_DEFS[self]

    @property
    def label(self) -> str:
        """Human-readable application name."""
        return HOST_APP_DEFS[self].label

    @property
    def platforms(self) -> frozenset[Platform]:
        """Host apps are cross-platform."""
        return frozenset(Platform)


HOST_APP_DEFS: dict[HostAppId, HostAppDef] = {
    HostAppId.VSCODE: HostAppDef(
        label="Visual Studio Code",
        command="code",
        darwin_app_name="Visual Studio Code",
        settings_dirs=_editor_settings("Code"),
        extra_files={
            Platform.WIN32: ("%APPDATA%\\Code\\User\\mcp.json",),
            Platform.DARWIN: ("~/Library/Application Support/Code/User/mcp.json",),
            Platform.LINUX: ("~/.config/Code/User/mcp.json",),
        },
    ),
    HostAppId.CURSOR: HostAppDef(
        label="Cursor",
        command="cursor",
        darwin_app_name="Cursor",
        settings_dirs=_editor_settings("Cursor"),
        extra_files=_same_everywhere("%USERPROFILE%\\.cursor\\mcp.json", "~/.cursor/mcp.json"),
    ),
    HostAppId.ANTIGRAVITY: HostAppDef(
        label="Antigravity",
        command="antigravity",
        darwin_app_name="Antigravity",
        settings_dirs=_editor_settings("Antigravity"),
        extra_files=_same_everywhere(
            "%USERPROFILE%\\.gemini\\antigravity\\mcp_config.json",
            "~/.gemini/antigravity/mcp_config.json",
        ),
    ),
    HostAppId.VOIDEDITOR: HostAppDef(
        label="Void",
        command="void",
        darwin_app_name="Void",
        settings_dirs=_editor_settings("Void"),
    ),
}


@dataclass(frozen=True, slots=True)
class ConfigAppDef:
    """Static description of an application backed up as plain files.

    Basenames must be unique within one platform's list: files are stored
    flattened in the app's backup directory.

    Attributes:
        label: Human-readable application name.
        files: Per-platform templates of the files to copy.
    """

    label: str
    files: dict[Platform, tuple[str, ...]]


class ConfigAppId(Enum):
    """Applications whose configuration files kitctl copies as-is."""

    GIT = "git"
    SSH = "ssh"
    BASH = "bash"
    ZSH = "zsh"
    POWERSHELL = "powershell"
    WINDOWS_TERMINAL = "windows-terminal"

    @property
    def definition(self) -> ConfigAppDef:
        """Static definition of this config app."""
        return CONFIG_APP_DEFS[self]

    @property
    def label(self) -> str:
        """Human-readable application name."""
        return CONFIG_APP_DEFS[self].label

    @property
    def platforms(self) -> frozenset[Platform]:
        """Operating systems for which files are defined."""
        return frozenset(p for p, files in CONFIG_APP_DEFS[self].files.items() if files)

    def files_for(self, platform: Platform) -> tuple[str, ...]:
        """Path templates of this app's files on a platform."""
        return CONFIG_APP_DEFS[self].files.get(platform, ())


_POSIX_ONLY = (Platform.DARWIN, Platform.LINUX)

CONFIG_APP_DEFS: dict[ConfigAppId, ConfigAppDef] = {
    ConfigAppId.GIT: ConfigAppDef(
        label="Git",
        files=_same_everywhere("%USERPROFILE%\\.gitconfig", "~/.gitconfig"),
    ),
    ConfigAppId.SSH: ConfigAppDef(
        label="OpenSSH client",
        files=_same_everywhere("%USERPROFILE%\\.ssh\\config", "~/.ssh/config"),
    ),
    ConfigAppId.BASH: ConfigAppDef(
        label="Bash",
        files={p: ("~/.bashrc", "~/.bash_profile", "~/.bash_aliases") for p in _POSIX_ONLY},
    ),
    ConfigAppId.ZSH: ConfigAppDef(
        label="Zsh",
        files={p: ("~/.zshrc", "~/.zprofile") for p in _POSIX_ONLY},
    ),
    ConfigAppId.POWERSHELL: ConfigAppDef(
        label="PowerShell",
        files=_same_everywhere(
            "%USERPROFILE%\\Documents\\PowerShell\\Microsoft.PowerShell_profile.ps1",
            "~/.config/powershell/Microsoft.PowerShell_profile.ps1",
        ),
    ),
    ConfigAppId.WINDOWS_TERMINAL: ConfigAppDef(
        label="Windows Terminal",
        files={
            Platform.WIN32: (
                "%LOCALAPPDATA%\\Packages\\Microsoft.WindowsTerminal_8wekyb3d8bbwe"
                "\\LocalState\\settings.json",
            ),
        },
    ),
}

# Any identifier kitctl can list, back up or restore
SourceId = ManagerId | HostAppId

# Anything with a last-backup time: sources and config apps
BackupTarget = ManagerId | HostAppId | ConfigAppId


def parse_source_id(value: str) -> SourceId:
    """Parse a manager or host-app id from its string value.

    Args:
        value: Identifier such as "apt" or "vscode" (case-insensitive).

    Returns:
        The matching ManagerId or HostAppId.

    Raises:
        ConfigurationError: If the value names no known source.
    """
    key = value.strip().lower()
    for enum_type in (ManagerId, HostAppId):
        try:
            return enum_type(key)
        except ValueError:
            continue
    known = ", ".join(s.value for s in all_source_ids())
    msg = f"Unknown source '{value}'. Known sources: {known}"
    raise ConfigurationError(msg)


def all_source_ids() -> list[SourceId]:
    """Every manager and host-app id, managers first."""
    return [*ManagerId, *HostAppId]


def sources_for_platform(platform: Platform) -> list[SourceId]:
    """Sources meaningful on the given platform, managers first."""
    return [s for s in all_source_ids() if platform in s.platforms]


def parse_config_app_id(value: str) -> ConfigAppId:
    """Parse a config app id such as "git" (case-insensitive).

    Raises:
        ConfigurationError: If the value names no known config app.
    """
    try:
        return ConfigAppId(value.strip().lower())
    except ValueError:
        known = ", ".join(app.value for app in ConfigAppId)
        msg = f"Unknown config app '{value}'. Known config apps: {known}"
        raise ConfigurationError(msg) from None


def parse_backup_target(value: str) -> BackupTarget:
    """Parse a source or config app id, as found in backup metadata.

    Raises:
        ConfigurationError: If the value names neither.
    """
    try:
        return parse_source_id(value)
    except ConfigurationError:
        return parse_config_app_id(value)


def config_apps_for_platform(platform: Platform) -> list[ConfigAppId]:
    """Config apps with files defined on the given platform."""
    return [app for app in ConfigAppId if platform in app.platforms]
