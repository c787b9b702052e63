from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml


class YamlFileSource:
    def __init__(self, path: Path, name: Optional[str] = None):
        self.path = Path(path)
        self.name = name or f"yaml:{self.path.name}"
        self.id = str(self.path.resolve())
        self.location: Optional[Path] = self.path

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> Dict[str, Any]:
        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items()}
