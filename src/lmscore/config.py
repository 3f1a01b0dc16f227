"""Configuration loading and validation."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from lmscore.errors import ConfigError, ConfigNotFoundError

__all__ = ["Config", "ModulesSettings"]

DEFAULT_CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
DEFAULT_ROUTE_EXTENSIONS = (".py",)


class Config:
    """Configuration accessor with dot-path key support."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}

    @classmethod
    def from_yaml(cls, path: str | Path) -> Config:
        """Load configuration from a YAML file.

        Raises:
            ConfigNotFoundError: If the file does not exist.
            ConfigError: If the file is not valid YAML or not a mapping.
        """
        path = Path(path)
        if not path.exists():
            raise ConfigNotFoundError(config_path=str(path))

        content = path.read_text(encoding="utf-8")
        try:
            parsed = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(message=f"Invalid YAML in config file: {path}") from e

        if parsed is None:
            return cls()
        if not isinstance(parsed, dict):
            raise ConfigError(message=f"Config file must be a YAML mapping: {path}")
        return cls(parsed)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-path key."""
        parts = key.split(".")
        current: Any = self._data
        for part in parts:
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-path key, creating parents as needed."""
        parts = key.split(".")
        current = self._data
        for part in parts[:-1]:
            child = current.get(part)
            if not isinstance(child, dict):
                child = {}
                current[part] = child
            current = child
        current[parts[-1]] = value

    def has(self, key: str) -> bool:
        """Check whether a dot-path key is present."""
        sentinel = object()
        return self.get(key, sentinel) is not sentinel

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy of the underlying data."""
        return copy.deepcopy(self._data)


class ModulesSettings(BaseModel):
    """Validated settings for module discovery and registration.

    Read from the ``modules`` section of a :class:`Config`.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    root: str = "./modules"
    traversal: Literal["flat", "nested"] = "nested"
    views: bool = False
    follow_symlinks: bool = False
    config_extensions: tuple[str, ...] = DEFAULT_CONFIG_EXTENSIONS
    route_extensions: tuple[str, ...] = DEFAULT_ROUTE_EXTENSIONS
    config_collision: Literal["error", "warn"] = "error"

    @field_validator("config_extensions", "route_extensions")
    @classmethod
    def _normalize_extensions(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("at least one extension is required")
        normalized = []
        for ext in value:
            ext = ext.strip().lower()
            if not ext or ext == ".":
                raise ValueError("extensions must be non-empty")
            normalized.append(ext if ext.startswith(".") else f".{ext}")
        return tuple(normalized)

    @classmethod
    def from_config(cls, config: Config | None = None, **overrides: Any) -> ModulesSettings:
        """Build settings from ``config`` with explicit overrides applied on top.

        Overrides whose value is ``None`` are ignored.

        Raises:
            ConfigError: If the ``modules`` section is not a mapping or fails validation.
        """
        data: dict[str, Any] = {}
        if config is not None:
            section = config.get("modules", {})
            if section is None:
                section = {}
            if not isinstance(section, dict):
                raise ConfigError(message="'modules' config section must be a mapping")
            data.update(section)
        data.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(message=f"Invalid modules settings: {e}") from e
