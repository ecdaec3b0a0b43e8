"""Exception hierarchy for kitctl.

Source errors are raised by the strict listing path of the adapters and
absorbed at batch boundaries. Configuration errors are usage errors and
always propagate to the caller.
"""


class KitctlError(Exception):
    """Base exception for all kitctl errors."""


class ConfigurationError(KitctlError, ValueError):
    """Raised for unknown source ids, missing settings or invalid requests."""


class SourceError(KitctlError):
    """Base exception for failures talking to a package manager or host app."""


class SourceUnavailableError(SourceError):
    """Raised when a package manager or host CLI cannot be found."""


class ExecutionError(SourceError):
    """Raised when an external command exits non-zero or cannot be started."""


class ParseError(SourceError):
    """Raised when command output does not match any expected shape."""
