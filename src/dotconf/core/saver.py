"""Rendering the pending tree as a settings file."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .codec import render_assignments
from .errors import SerializationError

logger = logging.getLogger(__name__)

IdentityProvider = Callable[[], Optional[str]]

UNKNOWN_IDENTITY = "Unknown"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def anonymous_identity() -> Optional[str]:
    return None


def unwrap_group(data: Dict[str, Any], group: str) -> Dict[str, Any]:
    """Return the mapping under ``group`` when it is the only top-level key."""
    if len(data) == 1 and group in data and isinstance(data[group], dict):
        return data[group]
    return data


def canonicalize(data: Dict[str, Any], group: str) -> Dict[str, Any]:
    """Sort top-level keys and drop a redundant wrapper named ``group``.

    Only the top level is sorted; nested mappings keep their order.
    """
    ordered = dict(sorted(data.items(), key=lambda item: str(item[0])))
    return unwrap_group(ordered, group)


def render_document(
    data: Dict[str, Any],
    group: str,
    identity: IdentityProvider = anonymous_identity,
    now: Optional[datetime] = None,
) -> str:
    """Render ``data`` as the complete text of a settings file.

    Raises:
        SerializationError: If a value cannot be rendered.
    """
    lines: List[str] = render_assignments(group, canonicalize(data, group))

    user = identity() or UNKNOWN_IDENTITY
    stamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    lines.append("")
    lines.append(f"// Last edited by {user} {stamp}")

    contents = "\n".join(lines)
    if not contents.strip():
        raise SerializationError("Failed to define configuration file contents")
    return contents.lstrip("\n") + "\n"


def write_document(path: Path, contents: str) -> None:
    """Replace the file at ``path`` with ``contents`` atomically."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    try:
        tmp.write_text(contents, encoding="utf-8")
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise
    logger.debug("Wrote %d bytes to %s", len(contents), path)
