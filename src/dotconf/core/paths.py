"""Dot-path parsing and navigation over nested mappings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .errors import ConfigPathError
from .types import PATH_DELIMITER


def parse_path(path: str) -> Tuple[str, ...]:
    """Split a dot path into its keys.

    The empty path addresses the root and yields an empty tuple.

    Raises:
        ConfigPathError: If any key segment is empty.
    """
    if path == "":
        return ()
    keys = tuple(path.split(PATH_DELIMITER))
    if any(k == "" for k in keys):
        raise ConfigPathError(f"Empty key segment in path {path!r}")
    return keys


@dataclass
class NodeHandle:
    """Cursor onto one node of a tree.

    ``container`` is the mapping holding the node and ``key`` its key in
    that mapping. The root handle has ``key`` set to ``None`` and
    ``container`` set to the root mapping itself.
    """

    container: Dict[str, Any]
    key: Optional[str]

    @property
    def is_root(self) -> bool:
        return self.key is None

    @property
    def value(self) -> Any:
        if self.is_root:
            return self.container
        return self.container[self.key]

    def replace(self, new_value: Any) -> None:
        """Replace the node in place; the owning tree sees the change."""
        if not self.is_root:
            self.container[self.key] = new_value
            return
        if not isinstance(new_value, dict):
            raise ConfigPathError(
                f"The root can only hold a mapping, got {type(new_value).__name__}"
            )
        replacement = dict(new_value)
        self.container.clear()
        self.container.update(replacement)


def resolve(tree: Dict[str, Any], path: str, create: bool = False) -> Optional[NodeHandle]:
    """Find the node at ``path``.

    With ``create`` missing keys are inserted: empty mappings for
    intermediate keys, ``None`` for the final key.

    Returns:
        A handle onto the node, or ``None`` when the path is absent (a
        present ``None`` value still yields a handle).

    Raises:
        ConfigPathError: If ``create`` is set and an existing intermediate
            node is not a mapping.
    """
    keys = parse_path(path)
    if not keys:
        return NodeHandle(tree, None)

    node: Any = tree
    last = len(keys) - 1
    for i, key in enumerate(keys):
        if not isinstance(node, dict):
            if create:
                raise ConfigPathError(
                    f"Cannot create {path!r}: "
                    f"{PATH_DELIMITER.join(keys[:i])!r} is not a mapping"
                )
            return None
        if key not in node:
            if not create:
                return None
            node[key] = None if i == last else {}
        if i == last:
            return NodeHandle(node, key)
        node = node[key]
    return None
