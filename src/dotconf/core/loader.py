"""Reading sources into a configuration tree."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .merge import merge_into
from .source import Source
from .tree import ConfigTree
from .types import LoadTarget, ROOT_NAME

logger = logging.getLogger(__name__)


def read_root(source: Source, root_name: str = ROOT_NAME) -> Optional[Dict[str, Any]]:
    """Return the data a source defines for ``root_name``, shaped for merging.

    For the ``Configuration`` root the mapping is returned as is; any other
    root is nested under its own name. Returns None when the source does
    not define a mapping under that name.
    """
    roots = source.read()
    data = roots.get(root_name)
    if not isinstance(data, dict):
        return None
    if root_name != ROOT_NAME:
        return {root_name: data}
    return data


def load_into(
    tree: ConfigTree,
    source: Source,
    target: LoadTarget = LoadTarget.USE,
    root_name: str = ROOT_NAME,
) -> bool:
    """Merge a source into the live or pending side of ``tree``.

    Settings from the source win over settings already in the tree;
    nested mappings from both sides are kept.

    Returns:
        False if the source does not exist. A source that exists but
        defines nothing under ``root_name`` still counts as loaded.
    """
    if not source.exists():
        logger.debug("Source %s not found, nothing loaded", source.name)
        return False

    data = read_root(source, root_name)
    if data is None:
        logger.debug("Source %s defines no %r mapping", source.name, root_name)
        return True

    if target is LoadTarget.SAVE:
        merge_into(tree.pending, data)
    else:
        merge_into(tree.live, data)
    logger.debug(
        "Loaded %d top-level keys from %s into %s tree",
        len(data), source.name, target.value,
    )
    return True
