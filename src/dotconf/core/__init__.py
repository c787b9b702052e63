from .config import Configuration
from .environment import Environment, RegisteredSource
from .merge import merge, merge_into
from .source import Source, open_source
from .tree import ConfigTree
from .types import LoadTarget

__all__ = [
    "Configuration",
    "ConfigTree",
    "Environment",
    "RegisteredSource",
    "Source",
    "open_source",
    "LoadTarget",
    "merge",
    "merge_into",
]
