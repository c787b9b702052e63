from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import redis

from ..core.flatten import nest


class RedisKeyValueSource:
    """Reads flat ``Root.k1.k2`` keys from Redis as nested root mappings."""

    def __init__(self, uri: str, name: Optional[str] = None, prefix: str = ""):
        self.uri = uri
        self.client = redis.Redis.from_url(uri, decode_responses=True)
        self.name = name or f"redis:{uri}"
        self.id = uri
        self.location: Optional[Path] = None
        self.prefix = prefix

    def _prefixed(self, key: str) -> str:
        return f"{self.prefix}{key}" if self.prefix else key

    def _unprefixed(self, key: str) -> str:
        if self.prefix and key.startswith(self.prefix):
            return key[len(self.prefix) :]
        return key

    def exists(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.exceptions.ConnectionError:
            return False

    def read(self) -> Dict[str, Any]:
        keys = self.client.keys(self._prefixed("*"))
        flat: Dict[str, Any] = {}
        if keys:
            values = self.client.mget(keys)
            for k, v in zip(keys, values):
                if v is not None:
                    flat[self._unprefixed(k)] = v
        return nest(flat)
