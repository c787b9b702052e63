"""Environment management for configuration sources."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from .config import Configuration
from .config_loader import ConfigLoader
from .errors import ConfigError
from .saver import IdentityProvider, anonymous_identity
from .source import Source, open_source
from .types import LoadTarget, ROOT_NAME

logger = logging.getLogger(__name__)


@dataclass
class RegisteredSource:
    """A source registered with an Environment.

    Attributes:
        source: The source instance.
        target: Tree the source is loaded into.
        root_name: Root mapping read from the source.
    """

    source: Source
    target: LoadTarget = LoadTarget.USE
    root_name: str = ROOT_NAME


class Environment:
    """Named, ordered collection of configuration sources.

    Sources come from the environment's entry in dotconf.yaml followed by
    any given explicitly. ``get_config`` loads them in that order, so later
    sources win at the leaves.
    """

    def __init__(
        self,
        name: str,
        sources: Optional[List[Union[str, Path]]] = None,
        config_path: Optional[Union[str, Path]] = None,
    ):
        """Initialize an Environment.

        Args:
            name: Name of the environment (e.g., "production").
            sources: Extra sources registered after the manifest's.
            config_path: Path to dotconf.yaml. If not provided, searches the
                current directory and its parents.
        """
        self.name = name
        self._registered: List[RegisteredSource] = []
        self._config_loader = ConfigLoader(config_path)

        self._load_from_config_file()

        if sources:
            self.register_sources(*sources)

    @property
    def config_file_path(self) -> Optional[Path]:
        return self._config_loader.config_path

    @property
    def registered_sources(self) -> List[RegisteredSource]:
        return list(self._registered)

    def _load_from_config_file(self) -> None:
        for source_config in self._config_loader.get_sources(self.name):
            try:
                parsed = self._config_loader.parse_source(source_config)
                self.register_source(
                    parsed["path_or_uri"],
                    target=parsed["target"],
                    root_name=parsed["root_name"],
                    name=parsed.get("name"),
                    prefix=parsed.get("prefix"),
                )
            except (ConfigError, ValueError) as e:
                logger.warning(
                    "Skipping source %r from %s: %s",
                    source_config, self.config_file_path, e,
                )

    def register_sources(self, *paths_or_uris: Union[str, Path]) -> None:
        for item in paths_or_uris:
            self.register_source(item)

    def register_source(
        self,
        path_or_uri: Union[str, Path, Source],
        *,
        target: Union[str, LoadTarget] = LoadTarget.USE,
        root_name: str = ROOT_NAME,
        name: Optional[str] = None,
        prefix: Optional[str] = None,
    ) -> None:
        """Register a single source.

        Args:
            path_or_uri: Path, URI or ready-made source instance.
            target: ``use`` or ``save``.
            root_name: Root mapping to read.
            name: Optional display name for the source.
            prefix: Key prefix, for key/value sources.
        """
        src = open_source(path_or_uri, name=name)
        if prefix is not None and hasattr(src, "prefix"):
            src.prefix = prefix
        self._registered.append(
            RegisteredSource(
                source=src,
                target=LoadTarget.coerce(target),
                root_name=root_name,
            )
        )

    def get_config(self, identity: IdentityProvider = anonymous_identity) -> Configuration:
        """Return a Configuration with every registered source loaded."""
        cfg = Configuration(identity=identity)
        for rs in self._registered:
            loaded = cfg.load(rs.source, rs.target, rs.root_name)
            if not loaded:
                logger.debug("Environment %s: source %s is missing", self.name, rs.source.name)
        return cfg
