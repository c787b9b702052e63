"""dotconf - hierarchical, dot-addressed configuration store.

Load settings from several sources, read and write them with dot paths,
and save the changed settings back to a settings file.
"""

from .core.config import Configuration
from .core.environment import Environment, RegisteredSource
from .core.errors import (
    ConfigError,
    ConfigPathError,
    DestinationResolutionError,
    InvalidTargetError,
    SerializationError,
    SettingsSyntaxError,
    SourceTypeError,
)
from .core.merge import merge, merge_into
from .core.source import Source, open_source
from .core.types import LoadTarget

__all__ = [
    "Configuration",
    "Environment",
    "RegisteredSource",
    "Source",
    "open_source",
    "LoadTarget",
    "merge",
    "merge_into",
    "ConfigError",
    "ConfigPathError",
    "DestinationResolutionError",
    "InvalidTargetError",
    "SerializationError",
    "SettingsSyntaxError",
    "SourceTypeError",
]
