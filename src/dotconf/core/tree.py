"""In-memory configuration tree with change tracking."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict

from .codec import serialize, unserialize
from .errors import ConfigPathError
from .paths import parse_path, resolve
from .types import ROOT_NAME


@dataclass
class ConfigTree:
    """Live settings plus the sparse set of pending changes.

    Attributes:
        live: Every setting currently in effect.
        pending: Only the settings written since the last save, in the same
            shape as ``live``. This is what ``save`` writes out.
    """

    live: Dict[str, Any] = field(default_factory=dict)
    pending: Dict[str, Any] = field(default_factory=dict)

    def get(self, path: str, default: Any = False) -> Any:
        """Return the setting at ``path`` or ``default`` when it is absent.

        Strings are normalized with ``unserialize``; containers are copied
        so callers cannot change the tree through them.
        """
        handle = resolve(self.live, path, create=False)
        if handle is None:
            return default
        value = handle.value
        if isinstance(value, str):
            return unserialize(value)
        if isinstance(value, (dict, list)):
            return deepcopy(value)
        return value

    def set(self, path: str, value: Any, overwrite: bool = True) -> None:
        """Write a setting to both the live and the pending tree.

        Missing intermediate mappings are created in both trees. An existing
        setting is only replaced when ``overwrite`` is true; when it is kept
        nothing is recorded as pending.

        Raises:
            ConfigPathError: For the empty path or when an intermediate node
                of the live tree is not a mapping.
        """
        keys = parse_path(path)
        if not keys:
            raise ConfigPathError("Cannot set the configuration root")

        node = self.live
        save_node = self.pending
        for i, key in enumerate(keys[:-1]):
            if key not in node:
                node[key] = {}
            elif not isinstance(node[key], dict):
                raise ConfigPathError(
                    f"Cannot set {path!r}: {'.'.join(keys[: i + 1])!r} is not a mapping"
                )
            if not isinstance(save_node.get(key), dict):
                save_node[key] = {}
            node = node[key]
            save_node = save_node[key]

        last = keys[-1]
        if last not in node or overwrite:
            stored = serialize(value)
            node[last] = stored
            save_node[last] = deepcopy(stored)

    def remove(self, path: str) -> bool:
        """Delete a setting from both trees.

        Empty parent mappings are left in place.

        Returns:
            True if the setting existed in the live tree.
        """
        keys = parse_path(path)
        if not keys:
            return False

        node: Any = self.live
        save_node: Any = self.pending
        for key in keys[:-1]:
            if not isinstance(node, dict) or key not in node:
                return False
            node = node[key]
            if isinstance(save_node, dict) and key in save_node:
                save_node = save_node[key]
            else:
                save_node = None

        last = keys[-1]
        if not isinstance(node, dict) or last not in node:
            return False
        del node[last]
        if isinstance(save_node, dict):
            save_node.pop(last, None)
        return True

    def load_array(self, path: str, data: Any, overwrite: bool = False) -> bool:
        """Place ``data`` at ``path`` unless something is already there.

        Unlike ``Configuration.load`` this replaces rather than merges. The
        path ``"Configuration"`` addresses the root.

        Returns:
            True if ``data`` was placed.
        """
        if path == ROOT_NAME:
            path = ""
        handle = resolve(self.live, path, create=True)
        if handle.value is None or overwrite:
            handle.replace(deepcopy(data))
            return True
        return False

    def clear_pending(self) -> None:
        self.pending = {}
