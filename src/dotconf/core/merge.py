"""Leaf-overwrite merging of nested mappings."""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict


def merge_into(base: Dict[str, Any], incoming: Dict[str, Any]) -> Dict[str, Any]:
    """Merge ``incoming`` into ``base`` in place.

    Keys missing from ``base`` are copied in. When both sides hold a
    mapping the merge recurses; any other conflict is resolved in favour
    of ``incoming`` (scalars and lists are replaced, never combined).

    Args:
        base: Mapping that receives the data.
        incoming: Mapping whose leaves win conflicts. It is not mutated and
            no part of it is shared with ``base`` afterwards.

    Returns:
        ``base``, for chaining.
    """
    for key, value in incoming.items():
        current = base.get(key)
        if key in base and isinstance(current, dict) and isinstance(value, dict):
            merge_into(current, value)
        else:
            base[key] = deepcopy(value)
    return base


def merge(first: Dict[str, Any], second: Dict[str, Any]) -> Dict[str, Any]:
    """Return a new mapping with ``second`` merged over ``first``.

    Neither argument is mutated.

    Example:
        >>> merge({"x": {"y": 1, "z": 2}}, {"x": {"y": 9}})
        {'x': {'y': 9, 'z': 2}}
    """
    return merge_into(deepcopy(first), second)
