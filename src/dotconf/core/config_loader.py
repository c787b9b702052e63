"""Loader for dotconf.yaml environment manifests."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .types import LoadTarget, ROOT_NAME

logger = logging.getLogger(__name__)

MANIFEST_NAME = "dotconf.yaml"


class ConfigLoader:
    """Handles loading and parsing of dotconf.yaml manifest files."""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize the manifest loader.

        Args:
            config_path: Path to dotconf.yaml. If None, looks in the current
                directory and its parents.
        """
        self.config_path = self._find_config_file(config_path)
        self._config: Optional[Dict[str, Any]] = None

    def _find_config_file(
        self, config_path: Optional[Union[str, Path]] = None
    ) -> Optional[Path]:
        if config_path is not None:
            path = Path(config_path)
            if path.exists():
                return path
            return None

        current = Path.cwd()
        for directory in (current, *current.parents):
            candidate = directory / MANIFEST_NAME
            if candidate.exists():
                return candidate
        return None

    def load(self) -> Dict[str, Any]:
        """Load the manifest.

        Returns:
            Parsed manifest, or an empty dict if there is no manifest.

        Raises:
            ValueError: If the manifest is not valid YAML.
        """
        if self.config_path is None:
            return {}

        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {MANIFEST_NAME} at {self.config_path}: {e}") from e
        except OSError as e:
            logger.warning("Could not read %s: %s", self.config_path, e)
            return {}
        self._config = data if isinstance(data, dict) else {}
        return self._config

    def get_environment_config(self, environment_name: str) -> Optional[Dict[str, Any]]:
        environments = self.load().get("environments") or {}
        return environments.get(environment_name)

    def get_sources(self, environment_name: str) -> List[Dict[str, Any]]:
        env_config = self.get_environment_config(environment_name)
        if env_config is None:
            return []
        return env_config.get("sources") or []

    def parse_source(self, source_config: Dict[str, Any]) -> Dict[str, Any]:
        """Turn one manifest source entry into ``register_source`` arguments.

        Relative paths are taken relative to the manifest's directory.

        Raises:
            ValueError: If the entry has neither ``path`` nor ``uri``, or
                names an unknown target.
        """
        result: Dict[str, Any] = {}

        if "path" in source_config:
            path = Path(source_config["path"])
            if not path.is_absolute() and self.config_path is not None:
                path = self.config_path.parent / path
            result["path_or_uri"] = path
        elif "uri" in source_config:
            result["path_or_uri"] = source_config["uri"]
        else:
            raise ValueError("Source must have either 'path' or 'uri'")

        result["target"] = LoadTarget.coerce(source_config.get("target", LoadTarget.USE))
        result["root_name"] = source_config.get("root", ROOT_NAME)
        if "name" in source_config:
            result["name"] = source_config["name"]
        if "prefix" in source_config:
            result["prefix"] = source_config["prefix"]
        return result
