"""Exception hierarchy for the dotconf configuration store.

Only fatal conditions are expressed as exceptions. Expected misses (an
absent path on read, a missing source file on load) are answered with
default values or boolean results and never raise.
"""

from __future__ import annotations

from typing import Optional


class ConfigError(Exception):
    """Base class for every error raised by dotconf."""


class ConfigPathError(ConfigError, ValueError):
    """A dot path cannot be used for the requested operation.

    Raised for empty key segments (``"a..b"``), for writes addressed at the
    tree root, and for writes that would have to pass through a node that
    is not a mapping.
    """


class InvalidTargetError(ConfigError, ValueError):
    """``Load`` was asked to fill a tree other than the live or pending one."""


class DestinationResolutionError(ConfigError):
    """``Save`` was called without a destination and none was remembered."""


class SerializationError(ConfigError):
    """A value could not be rendered into the settings file grammar."""


class SourceTypeError(ConfigError, ValueError):
    """No source reader understands the given path or URI."""


class SettingsSyntaxError(ConfigError):
    """A settings file could not be parsed.

    Attributes:
        lineno: 1-based line of the offending token, when known.
    """

    def __init__(self, message: str, lineno: Optional[int] = None):
        self.lineno = lineno
        if lineno is not None:
            message = f"line {lineno}: {message}"
        super().__init__(message)
