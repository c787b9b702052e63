"""Unit tests for the Configuration facade: load, save and round trips."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from dotconf import (
    Configuration,
    DestinationResolutionError,
    InvalidTargetError,
    LoadTarget,
    SerializationError,
)


def _statements(path: Path):
    """Return the non-comment, non-blank lines of a saved file."""
    return [
        line for line in path.read_text().splitlines()
        if line and not line.startswith("//")
    ]


@pytest.fixture
def config() -> Configuration:
    return Configuration(identity=lambda: "admin")


class TestLoad:
    """Test suite for Configuration.load."""

    def test_missing_file(self, config, tmp_path):
        assert config.load(tmp_path / "nope.conf") is False
        assert config.values() == {}

    def test_load_for_use(self, config, tmp_path):
        path = tmp_path / "config.conf"
        path.write_text("Configuration['Database']['Host'] = 'db';\n")
        assert config.load(path) is True
        assert config.get("Database.Host") == "db"
        assert config.pending() == {}
        assert config.destination is None

    def test_load_for_save(self, config, tmp_path):
        path = tmp_path / "config.conf"
        path.write_text("Configuration['Database']['Host'] = 'db';\n")
        assert config.load(path, LoadTarget.SAVE) is True
        assert config.get("Database.Host", "d") == "d"
        assert config.pending() == {"Database": {"Host": "db"}}
        assert config.destination == path

    def test_target_accepts_strings(self, config, tmp_path):
        path = tmp_path / "config.conf"
        path.write_text("Configuration['a'] = 'b';\n")
        assert config.load(path, "Save") is True
        assert config.pending() == {"a": "b"}

    def test_unknown_target(self, config, tmp_path):
        path = tmp_path / "config.conf"
        path.write_text("Configuration['a'] = 'b';\n")
        with pytest.raises(InvalidTargetError):
            config.load(path, "Later")

    def test_missing_save_file_still_remembered(self, config, tmp_path):
        path = tmp_path / "new.conf"
        assert config.load(path, LoadTarget.SAVE) is False
        assert config.destination == path

    def test_use_load_forgets_destination(self, config, tmp_path):
        save = tmp_path / "config.conf"
        save.write_text("Configuration['a'] = 'b';\n")
        other = tmp_path / "defaults.conf"
        other.write_text("Configuration['c'] = 'd';\n")
        config.load(save, LoadTarget.SAVE)
        config.load(other)
        assert config.destination is None

    def test_file_without_root_is_success_without_merge(self, config, tmp_path):
        path = tmp_path / "config.conf"
        path.write_text("Other['a'] = 'b';\n")
        assert config.load(path) is True
        assert config.values() == {}

    def test_non_mapping_root_is_ignored(self, config, tmp_path):
        path = tmp_path / "config.conf"
        path.write_text("Configuration = 'flat';\n")
        assert config.load(path) is True
        assert config.values() == {}

    def test_named_root_is_nested(self, config, tmp_path):
        path = tmp_path / "locale.conf"
        path.write_text("Locale['en']['Hello'] = 'Hello';\n")
        assert config.load(path, root_name="Locale") is True
        assert config.get("Locale.en.Hello") == "Hello"

    def test_later_loads_win_at_leaves(self, config, tmp_path):
        defaults = tmp_path / "defaults.conf"
        defaults.write_text(
            "Configuration['db']['host'] = 'localhost';\n"
            "Configuration['db']['port'] = '5432';\n"
        )
        local = tmp_path / "config.conf"
        local.write_text("Configuration['db']['host'] = 'prod';\n")
        config.load(defaults)
        config.load(local)
        assert config.get("db") == {"host": "prod", "port": "5432"}

    def test_yaml_and_json_sources(self, config, tmp_path):
        yml = tmp_path / "c.yaml"
        yml.write_text("Configuration:\n  db:\n    host: yhost\n    pool: 5\n")
        js = tmp_path / "c.json"
        js.write_text(json.dumps({"Configuration": {"db": {"host": "jhost"}}}))
        config.load(yml)
        config.load(js)
        assert config.get("db.host") == "jhost"
        assert config.get("db.pool") == 5


class TestLoadArray:
    """Test suite for Configuration.load_array."""

    def test_load_array(self, config):
        assert config.load_array("Routes", {"Default": "home"}) is True
        assert config.load_array("Routes", {"Default": "other"}) is False
        assert config.get("Routes.Default") == "home"


class TestSave:
    """Test suite for Configuration.save."""

    def test_no_destination(self, config):
        config.set("a", "b")
        with pytest.raises(DestinationResolutionError):
            config.save()
        assert config.pending() == {"a": "b"}

    def test_writes_statements_and_clears_pending(self, config, tmp_path):
        path = tmp_path / "config.conf"
        config.set("Garden.Title", "Forum")
        config.set("Garden.Debug", False)
        config.set("Version", 2)
        assert config.save(path) is True
        assert _statements(path) == [
            "Configuration['Garden']['Title'] = 'Forum';",
            "Configuration['Garden']['Debug'] = FALSE;",
            "Configuration['Version'] = '2';",
        ]
        assert config.pending() == {}
        assert config.get("Garden.Title") == "Forum"

    def test_sections_and_footer(self, config, tmp_path):
        path = tmp_path / "config.conf"
        config.set("db.host", "local")
        config.save(path)
        lines = path.read_text().splitlines()
        assert lines[0] == "// db"
        assert lines[1] == "Configuration['db']['host'] = 'local';"
        assert lines[2] == ""
        assert lines[3].startswith("// Last edited by admin ")

    def test_unknown_identity(self, tmp_path):
        path = tmp_path / "config.conf"
        config = Configuration()
        config.set("a", "b")
        config.save(path)
        assert "// Last edited by Unknown " in path.read_text()

    def test_top_level_sorted_nested_order_kept(self, config, tmp_path):
        path = tmp_path / "config.conf"
        config.set("b.z", "1")
        config.set("b.a", "2")
        config.set("a", "3")
        config.save(path)
        assert _statements(path) == [
            "Configuration['a'] = '3';",
            "Configuration['b']['z'] = '1';",
            "Configuration['b']['a'] = '2';",
        ]

    def test_single_group_collapses(self, config, tmp_path):
        path = tmp_path / "locale.conf"
        config.set("Locale.en.Hello", "Hello")
        config.save(path, group="Locale")
        assert _statements(path) == ["Locale['en']['Hello'] = 'Hello';"]
        fresh = Configuration()
        fresh.load(path, root_name="Locale")
        assert fresh.get("Locale.en.Hello") == "Hello"

    def test_current_group_used_and_cleared(self, config, tmp_path):
        path = tmp_path / "locale.conf"
        config.current_group = "Locale"
        config.set("Locale.x", "1")
        config.save(path)
        assert _statements(path) == ["Locale['x'] = '1';"]
        assert config.current_group == ""

    def test_grammar_scenarios(self, config, tmp_path):
        path = tmp_path / "config.conf"
        config.set("list", ["a", "b"])
        config.set("nested", {"0": {"x": 1}})
        config.save(path)
        assert _statements(path) == [
            "Configuration['list'] = ['a', 'b'];",
            "Configuration['nested']['0']['x'] = '1';",
        ]

    def test_save_to_remembered_destination(self, config, tmp_path):
        path = tmp_path / "config.conf"
        path.write_text("Configuration['Garden']['Title'] = 'Old';\n")
        config.load(path, LoadTarget.SAVE)
        config.set("Garden.Title", "New")
        config.set("Garden.Locale", "en")
        assert config.save() is True
        assert _statements(path) == [
            "Configuration['Garden']['Title'] = 'New';",
            "Configuration['Garden']['Locale'] = 'en';",
        ]
        assert config.destination is None
        with pytest.raises(DestinationResolutionError):
            config.save()

    def test_remove_then_save_drops_setting(self, config, tmp_path):
        path = tmp_path / "config.conf"
        path.write_text(
            "Configuration['a'] = '1';\n"
            "Configuration['b'] = '2';\n"
        )
        config.load(path)
        config.load(path, LoadTarget.SAVE)
        assert config.remove("a") is True
        config.save()
        assert _statements(path) == ["Configuration['b'] = '2';"]

    def test_require_source_file_keeps_existing_settings(self, config, tmp_path):
        path = tmp_path / "config.conf"
        path.write_text(
            "Configuration['a'] = 'keep';\n"
            "Configuration['b'] = 'old';\n"
        )
        config.set("b", "new")
        config.save(path)
        assert _statements(path) == [
            "Configuration['a'] = 'keep';",
            "Configuration['b'] = 'new';",
        ]

    def test_existing_settings_kept_for_named_group(self, config, tmp_path):
        """Settings already in a non-Configuration file stay at their level."""
        path = tmp_path / "locale.conf"
        path.write_text("Locale['y'] = 'old';\n")
        config.current_group = "Locale"
        config.set("x", "new")
        config.save(path)
        assert _statements(path) == [
            "Locale['x'] = 'new';",
            "Locale['y'] = 'old';",
        ]
        fresh = Configuration()
        fresh.load(path, root_name="Locale")
        assert fresh.get("Locale.x") == "new"
        assert fresh.get("Locale.y") == "old"

    def test_existing_settings_kept_for_group_wrapped_changes(self, config, tmp_path):
        path = tmp_path / "locale.conf"
        path.write_text("Locale['y'] = 'old';\n")
        config.set("Locale.x", "new")
        config.save(path, group="Locale")
        assert _statements(path) == [
            "Locale['x'] = 'new';",
            "Locale['y'] = 'old';",
        ]

    def test_failed_write_leaves_no_temporary_file(self, config, tmp_path):
        path = tmp_path / "config.conf"
        config.set("a", "b")
        with patch("dotconf.core.saver.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                config.save(path)
        assert not path.exists()
        assert list(tmp_path.iterdir()) == []
        assert config.pending() == {"a": "b"}

    def test_without_source_file_replaces(self, config, tmp_path):
        path = tmp_path / "config.conf"
        path.write_text("Configuration['a'] = 'gone';\n")
        config.set("b", "new")
        config.save(path, require_source_file=False)
        assert _statements(path) == ["Configuration['b'] = 'new';"]

    def test_serialization_error_keeps_pending(self, config, tmp_path):
        path = tmp_path / "config.conf"
        config.set("l", ["a", {"b": "c"}])
        with pytest.raises(SerializationError):
            config.save(path)
        assert not path.exists()
        assert config.pending() == {"l": ["a", {"b": "c"}]}

    def test_creates_parent_directories(self, config, tmp_path):
        path = tmp_path / "conf" / "nested" / "config.conf"
        config.set("a", "b")
        config.save(path)
        assert path.exists()


class TestRoundTrip:
    """Save/load round trips."""

    def test_round_trip(self, config, tmp_path):
        path = tmp_path / "config.conf"
        config.set("db", {"host": "local", "port": 5432, "ssl": True})
        config.set("app.name", "it's \"quoted\" \\ here")
        config.set("app.none", None)
        config.set("app.plugins", ["Tagging", "Flagging"])
        original = config.values()
        config.save(path)

        fresh = Configuration()
        assert fresh.load(path) is True
        assert fresh.values() == original
        assert fresh.get("db.port") == 5432
        assert fresh.get("db.ssl") is True
