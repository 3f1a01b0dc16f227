"""Shared test fixtures: module tree builders and recording host hooks."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from lmscore.registry.types import HostRegistrationHooks


# === Recording hooks ===


class RecordingHooks:
    """Records every host hook call, in order, as ``(hook_name, *args)`` tuples."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []

    def merge_config(self, path: Path, key: str) -> None:
        self.calls.append(("merge_config", path, key))

    def load_routes(self, path: Path) -> None:
        self.calls.append(("load_routes", path))

    def register_migrations(self, path: Path) -> None:
        self.calls.append(("register_migrations", path))

    def register_views(self, path: Path, namespace: str) -> None:
        self.calls.append(("register_views", path, namespace))

    def hooks(self, views: bool = True) -> HostRegistrationHooks:
        return HostRegistrationHooks(
            merge_config=self.merge_config,
            load_routes=self.load_routes,
            register_migrations=self.register_migrations,
            register_views=self.register_views if views else None,
        )

    def of(self, hook_name: str) -> list[tuple[Any, ...]]:
        """Arguments of every call to ``hook_name``."""
        return [call[1:] for call in self.calls if call[0] == hook_name]

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]


# === Module tree builder ===


def _make_module(
    root: Path,
    name: str,
    config: dict[str, str] | None = None,
    routes: tuple[str, ...] = (),
    migrations: bool = False,
    views: bool = False,
) -> Path:
    module_dir = root / name
    module_dir.mkdir(parents=True, exist_ok=True)

    if config is not None:
        config_dir = module_dir / "config"
        config_dir.mkdir(exist_ok=True)
        for filename, content in config.items():
            (config_dir / filename).write_text(content)

    if routes:
        routes_dir = module_dir / "routes"
        routes_dir.mkdir(exist_ok=True)
        for filename in routes:
            (routes_dir / filename).write_text("# routes\n")

    if migrations:
        migrations_dir = module_dir / "database" / "migrations"
        migrations_dir.mkdir(parents=True, exist_ok=True)
        (migrations_dir / "2025_08_13_000000_create_table.py").write_text("")

    if views:
        views_dir = module_dir / "resources" / "views"
        views_dir.mkdir(parents=True, exist_ok=True)
        (views_dir / "index.html").write_text("<h1>index</h1>\n")

    return module_dir


# === Fixtures ===


@pytest.fixture
def recorder() -> RecordingHooks:
    """Fresh recording hooks."""
    return RecordingHooks()


@pytest.fixture
def modules_root(tmp_path: Path) -> Path:
    """An empty, existing modules root directory."""
    root = tmp_path / "Modules"
    root.mkdir()
    return root


@pytest.fixture
def make_module() -> Callable[..., Path]:
    """Return a builder: make_module(root, name, config=, routes=, migrations=, views=)."""
    return _make_module


@pytest.fixture
def lms_tree(modules_root: Path) -> Path:
    """A modules root shaped like the LMS: Core and Learning namespaces."""
    _make_module(modules_root, "Core/User", config={"user.yaml": "per_page: 20\n"}, migrations=True)
    _make_module(modules_root, "Core/Auth", migrations=True)
    _make_module(modules_root, "Learning/Course", routes=("web.py", "api.py"), migrations=True, views=True)
    _make_module(modules_root, "Learning/Content")
    _make_module(modules_root, "Learning/Assessment", config={"grading.json": '{"pass_mark": 50}'})
    return modules_root
