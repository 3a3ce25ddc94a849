"""Configuration — Pydantic Settings + YAML loading."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from edgewise.core.relationship import RelationshipOptions

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "default.yaml"


class StorageSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="EDGEWISE_STORAGE_")

    db_path: str = "edgewise.db"
    table_prefix: str = "edgewise_"
    wal_mode: bool = True
    busy_timeout_ms: int = 5000


class RelationshipDefaults(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="EDGEWISE_DEFAULTS_")

    cardinality: str = "many-to-many"
    reciprocal: bool = False
    self_connections: bool = False
    duplicate_connections: bool = False

    def to_options(self) -> RelationshipOptions:
        return RelationshipOptions(**self.model_dump())


class RelationshipConfig(BaseModel):
    """A relationship declared in YAML."""

    name: str
    from_type: str
    to_type: str
    from_label: str = ""
    to_label: str = ""
    options: dict[str, Any] = Field(default_factory=dict)


class Settings(BaseSettings):
    """Root settings — merges defaults, YAML config, and env vars."""

    model_config = SettingsConfigDict(env_prefix="EDGEWISE_")

    storage: StorageSettings = Field(default_factory=StorageSettings)
    defaults: RelationshipDefaults = Field(default_factory=RelationshipDefaults)
    relationships: list[RelationshipConfig] = Field(default_factory=list)
    log_level: str = "INFO"

    @classmethod
    def load(cls, config_path: Path | str | None = None) -> Settings:
        """Load settings from YAML file, falling back to defaults."""
        data: dict[str, Any] = {}

        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH

        path = Path(config_path)
        if path.exists():
            with open(path, encoding="utf-8") as f:
                raw = yaml.safe_load(f)
                if isinstance(raw, dict):
                    data = raw

        return cls(**data)
