"""Configuration source readers.

File sources (settings, yaml, json) and a Redis key/value source. Readers
are imported lazily by ``dotconf.core.source.open_source`` so that optional
client libraries are only needed when used.
"""

__all__ = [
    "SettingsFileSource",
    "YamlFileSource",
    "JsonFileSource",
    "RedisKeyValueSource",
]
