"""Type definitions for the dotconf configuration store."""

from __future__ import annotations

from enum import Enum
from typing import Union

from .errors import InvalidTargetError

ROOT_NAME = "Configuration"
DEFAULT_GROUP = "Configuration"
PATH_DELIMITER = "."


class LoadTarget(str, Enum):
    """Which tree a ``Load`` call merges into.

    Attributes:
        USE: the live tree, queried by ``get``.
        SAVE: the pending tree, written by the next ``save``.
    """

    USE = "use"
    SAVE = "save"

    @classmethod
    def coerce(cls, value: Union[str, "LoadTarget"]) -> "LoadTarget":
        """Accept an enum member or its name/value in any case.

        Raises:
            InvalidTargetError: If ``value`` names no target.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            lowered = value.lower()
            for member in cls:
                if lowered in (member.value, member.name.lower()):
                    return member
        raise InvalidTargetError(
            f"Unknown load target {value!r}; expected one of "
            f"{', '.join(m.value for m in cls)}"
        )
