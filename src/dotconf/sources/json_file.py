from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional


class JsonFileSource:
    def __init__(self, path: Path, name: Optional[str] = None):
        self.path = Path(path)
        self.name = name or f"json:{self.path.name}"
        self.id = str(self.path.resolve())
        self.location: Optional[Path] = self.path

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> Dict[str, Any]:
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            return {}
        return data
