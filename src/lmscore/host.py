"""In-memory host application implementing the registration hooks."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from lmscore.config import Config
from lmscore.errors import ConfigError
from lmscore.registry.types import HostRegistrationHooks

logger = logging.getLogger(__name__)

__all__ = ["InMemoryHost", "load_config_file"]


def load_config_file(path: Path) -> dict[str, Any]:
    """Parse a YAML or JSON module config file into a mapping.

    An empty file yields an empty dict.

    Raises:
        ConfigError: If the file cannot be parsed, is not a mapping, or has
            an unsupported extension.
    """
    suffix = path.suffix.lower()
    content = path.read_text(encoding="utf-8")

    if suffix in (".yaml", ".yml"):
        try:
            parsed = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(message=f"Invalid YAML in module config file: {path}") from e
    elif suffix == ".json":
        if not content.strip():
            return {}
        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as e:
            raise ConfigError(message=f"Invalid JSON in module config file: {path}") from e
    else:
        raise ConfigError(message=f"Unsupported module config file type '{suffix}': {path}")

    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ConfigError(message=f"Module config file must be a mapping: {path}")
    return parsed


class InMemoryHost:
    """Applies module registrations to in-memory tables.

    Module config files provide defaults under their key; values already
    present in the application config passed at construction always win.
    Route files, migration directories and view namespaces are recorded
    in registration order, and every hook call is appended to ``calls``.
    """

    def __init__(self, config: Config | None = None) -> None:
        self.config = config if config is not None else Config()
        self._app_config = Config(self.config.to_dict())
        self.route_files: list[Path] = []
        self.migration_dirs: list[Path] = []
        self.view_paths: dict[str, Path] = {}
        self.calls: list[tuple[Any, ...]] = []

    def merge_config(self, path: Path, key: str) -> None:
        data = load_config_file(path)
        app_value = self._app_config.get(key)
        if isinstance(app_value, dict):
            merged: Any = {**data, **app_value}
        elif app_value is not None:
            merged = app_value
        else:
            merged = data
        self.config.set(key, merged)
        self.calls.append(("merge_config", path, key))

    def load_routes(self, path: Path) -> None:
        self.route_files.append(path)
        self.calls.append(("load_routes", path))

    def register_migrations(self, path: Path) -> None:
        self.migration_dirs.append(path)
        self.calls.append(("register_migrations", path))

    def register_views(self, path: Path, namespace: str) -> None:
        if namespace in self.view_paths:
            logger.warning("View namespace '%s' re-registered, replacing %s", namespace, self.view_paths[namespace])
        self.view_paths[namespace] = path
        self.calls.append(("register_views", path, namespace))

    def hooks(self, views: bool = True) -> HostRegistrationHooks:
        """Return registration hooks bound to this host."""
        return HostRegistrationHooks(
            merge_config=self.merge_config,
            load_routes=self.load_routes,
            register_migrations=self.register_migrations,
            register_views=self.register_views if views else None,
        )
