"""Conversion between nested mappings and flat dot-path keys."""

from __future__ import annotations

from typing import Any, Dict, Iterator, Optional, Tuple

from .types import PATH_DELIMITER


def iter_paths(
    data: Dict[str, Any],
    parent: str = "",
    depth: Optional[int] = None,
) -> Iterator[Tuple[str, Any]]:
    """Flatten nested mappings using dot paths.

    Lists and scalars are emitted as leaves.

    Args:
        data: Mapping to flatten.
        parent: Path prefix for recursion.
        depth: How many mapping levels to descend (None for unlimited).

    Yields:
        Tuples of (dot path, value).
    """
    if depth is not None and depth < 0:
        return

    for key, value in data.items():
        full_key = str(key) if not parent else f"{parent}{PATH_DELIMITER}{key}"
        if isinstance(value, dict) and value and (depth is None or depth > 0):
            next_depth = None if depth is None else depth - 1
            yield from iter_paths(value, full_key, next_depth)
        else:
            yield full_key, value


def nest(flat: Dict[str, Any]) -> Dict[str, Any]:
    """Build nested mappings from dot-path keys.

    A later key that needs an earlier leaf as a mapping replaces it.
    """
    nested: Dict[str, Any] = {}
    for path, value in flat.items():
        parts = path.split(PATH_DELIMITER)
        node = nested
        for part in parts[:-1]:
            if part not in node or not isinstance(node[part], dict):
                node[part] = {}
            node = node[part]
        node[parts[-1]] = value
    return nested
