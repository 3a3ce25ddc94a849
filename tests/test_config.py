"""Tests for Settings configuration loading."""

from __future__ import annotations

from unittest.mock import MagicMock

from edgewise.config import (
    RelationshipConfig,
    RelationshipDefaults,
    Settings,
    StorageSettings,
)
from edgewise.core.registry import RelationshipRegistry
from edgewise.core.side import Cardinality


class TestSettingsDefaults:
    def test_storage_defaults(self):
        s = StorageSettings()
        assert s.table_prefix == "edgewise_"
        assert s.wal_mode is True
        assert s.busy_timeout_ms == 5000

    def test_relationship_defaults(self):
        d = RelationshipDefaults()
        assert d.cardinality == "many-to-many"
        assert d.reciprocal is False
        assert d.self_connections is False
        assert d.duplicate_connections is False

    def test_to_options(self):
        options = RelationshipDefaults(self_connections=True).to_options()
        assert options.self_connections is True
        assert options.cardinality == "many-to-many"

    def test_root_settings_defaults(self):
        s = Settings()
        assert s.relationships == []
        assert s.log_level == "INFO"


class TestSettingsLoad:
    def test_missing_file_falls_back(self, tmp_path):
        s = Settings.load(tmp_path / "nope.yaml")
        assert s.storage.db_path == "edgewise.db"

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "edgewise.yaml"
        path.write_text(
            "storage:\n"
            "  table_prefix: booking_\n"
            "defaults:\n"
            "  duplicate_connections: true\n"
            "relationships:\n"
            "  - name: hotel_rooms\n"
            "    from_type: hotel\n"
            "    to_type: room\n"
            "    from_label: Hotel\n"
            "    options:\n"
            "      cardinality: one-to-many\n"
            "log_level: DEBUG\n",
            encoding="utf-8",
        )
        s = Settings.load(path)
        assert s.storage.table_prefix == "booking_"
        assert s.defaults.duplicate_connections is True
        assert s.relationships[0] == RelationshipConfig(
            name="hotel_rooms",
            from_type="hotel",
            to_type="room",
            from_label="Hotel",
            options={"cardinality": "one-to-many"},
        )
        assert s.log_level == "DEBUG"

    def test_non_mapping_yaml_ignored(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        assert Settings.load(path).relationships == []


class TestRegistryFromSettings:
    def test_bootstrap(self):
        settings = Settings(
            defaults=RelationshipDefaults(self_connections=True),
            relationships=[
                RelationshipConfig(
                    name="hotel_rooms", from_type="hotel", to_type="room",
                    from_label="Hotel", to_label="Room",
                    options={"cardinality": "one-to-many"},
                ),
                RelationshipConfig(
                    name="friends", from_type="user", to_type="user",
                    options={"reciprocal": True},
                ),
            ],
        )
        registry = RelationshipRegistry.from_settings(settings, MagicMock())
        rooms = registry.get("hotel_rooms")
        assert rooms.get_describe() == "Hotel -> Room"
        assert rooms.get_side("from").cardinality is Cardinality.ONE
        assert rooms.allow_self_connections() is True
        assert registry.get("friends").get_describe() == "user <-> user"
