from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import DestinationResolutionError
from .loader import load_into
from .merge import merge
from .saver import (
    IdentityProvider,
    anonymous_identity,
    render_document,
    unwrap_group,
    write_document,
)
from .source import Source, open_source
from .tree import ConfigTree
from .types import DEFAULT_GROUP, LoadTarget, ROOT_NAME

logger = logging.getLogger(__name__)


@dataclass
class Configuration:
    """Dot-addressed settings with load, change tracking and save.

    Usage::

        config = Configuration()
        config.load("conf/config-defaults.conf")
        config.load("conf/config.conf", LoadTarget.SAVE)
        config.get("Database.Host", "localhost")
        config.set("Garden.Title", "Forum")
        config.save()

    Attributes:
        current_group: Group used by ``save`` when none is given.
        identity: Callable naming whoever is making changes, recorded in
            the footer of saved files.
    """

    tree: ConfigTree = field(default_factory=ConfigTree)
    current_group: str = ""
    identity: IdentityProvider = anonymous_identity
    _file: Optional[Path] = field(default=None, init=False, repr=False)

    @property
    def destination(self) -> Optional[Path]:
        """File remembered by the last load for save, if any."""
        return self._file

    def get(self, path: str, default: Any = False) -> Any:
        return self.tree.get(path, default)

    def set(self, path: str, value: Any, overwrite: bool = True) -> None:
        self.tree.set(path, value, overwrite)

    def remove(self, path: str) -> bool:
        return self.tree.remove(path)

    def values(self) -> Dict[str, Any]:
        return self.tree.get("", {})

    def pending(self) -> Dict[str, Any]:
        return deepcopy(self.tree.pending)

    def clear_save_data(self) -> None:
        self.tree.clear_pending()

    def load(
        self,
        source: Union[str, Path, Source],
        target: Union[str, LoadTarget] = LoadTarget.USE,
        root_name: str = ROOT_NAME,
    ) -> bool:
        """Merge settings from ``source`` into the tree.

        Args:
            source: A path, URI or source instance.
            target: ``use`` merges into the live settings; ``save`` merges
                into the pending changes and remembers the file as the
                destination of the next ``save``.
            root_name: Name of the root mapping to read from the source.
                Roots other than ``Configuration`` are nested under their
                name.

        Returns:
            False if the source does not exist.

        Raises:
            InvalidTargetError: If ``target`` is not a known target.
        """
        load_target = LoadTarget.coerce(target)
        src = open_source(source)
        # Only a load for save may pick the file that save overwrites.
        if load_target is LoadTarget.SAVE:
            self._file = src.location
        else:
            self._file = None
        return load_into(self.tree, src, load_target, root_name)

    def load_array(self, path: str, data: Any, overwrite: bool = False) -> bool:
        return self.tree.load_array(path, data, overwrite)

    def render(self, group: str = "", base: Optional[Dict[str, Any]] = None) -> str:
        """Return the settings file text for the pending changes.

        Args:
            group: Root name used on the left of each statement.
            base: Settings to render underneath the pending ones, in the
                shape they have under ``group`` in a settings file.
        """
        group = group or self.current_group or DEFAULT_GROUP
        data = self.tree.pending
        if base:
            data = merge(base, unwrap_group(data, group))
        return render_document(data, group, self.identity)

    def save(
        self,
        destination: Union[str, Path, None] = None,
        group: str = "",
        require_source_file: bool = True,
    ) -> bool:
        """Write the pending changes to a settings file.

        Args:
            destination: File to write. Defaults to the file remembered by
                the last load for save.
            group: Root name for the statements. Defaults to
                ``current_group`` and then to ``Configuration``.
            require_source_file: Keep the settings already in the
                destination file, letting the pending changes win. When
                false the pending changes replace the file outright.

        Returns:
            True once the file has been written; the pending changes and the
            remembered destination and group are then cleared.

        Raises:
            DestinationResolutionError: If no destination is known.
            SerializationError: If the settings cannot be rendered.
        """
        path = Path(destination) if destination else self._file
        if path is None:
            raise DestinationResolutionError("You must specify a file path to be saved")
        group = group or self.current_group or DEFAULT_GROUP

        base: Optional[Dict[str, Any]] = None
        if require_source_file and path != self._file:
            src = open_source(path)
            if src.exists():
                existing = src.read().get(group)
                if isinstance(existing, dict):
                    base = existing

        write_document(path, self.render(group, base))
        logger.debug("Saved configuration group %s to %s", group, path)

        self.tree.clear_pending()
        self._file = None
        self.current_group = ""
        return True
