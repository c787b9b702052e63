"""Source protocol and reader selection for configuration sources."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union, runtime_checkable

from .errors import SourceTypeError


@runtime_checkable
class Source(Protocol):
    """Protocol for anything ``Configuration.load`` can read from.

    Sources only read. Saving always writes a settings file, so a source
    offers itself as a save destination through ``location``.
    """

    id: str
    name: str
    location: Optional[Path]

    def exists(self) -> bool:
        """Return True if the source can be opened."""
        ...

    def read(self) -> Dict[str, Any]:
        """Return the root mappings defined by the source, keyed by root name.

        A root whose value is not a mapping is still returned; the caller
        decides what to do with it.
        """
        ...


def open_source(path_or_uri: Union[str, Path, Source], name: Optional[str] = None) -> Source:
    """Pick a source reader for a path or URI.

    Source instances are returned unchanged.

    Raises:
        SourceTypeError: If the URI scheme is not supported.
    """
    if isinstance(path_or_uri, Source):
        return path_or_uri
    s = str(path_or_uri)
    if s.startswith("redis://") or s.startswith("rediss://"):
        from ..sources.redis_kv import RedisKeyValueSource
        return RedisKeyValueSource(s, name=name)
    if "://" in s:
        raise SourceTypeError(f"Unsupported source type: {path_or_uri}")
    p = Path(s)
    suffix = p.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        from ..sources.yaml_file import YamlFileSource
        return YamlFileSource(p, name=name)
    if suffix == ".json":
        from ..sources.json_file import JsonFileSource
        return JsonFileSource(p, name=name)
    from ..sources.settings_file import SettingsFileSource
    return SettingsFileSource(p, name=name)
