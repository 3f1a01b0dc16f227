"""Tests for InMemoryHost and load_config_file()."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from lmscore.config import Config
from lmscore.errors import ConfigError
from lmscore.host import InMemoryHost, load_config_file
from lmscore.registry import ModuleRegistry


# === load_config_file() ===


class TestLoadConfigFile:
    def test_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "auth.yaml"
        path.write_text("driver: session\nlifetime: 120\n")
        assert load_config_file(path) == {"driver": "session", "lifetime": 120}

    def test_yml(self, tmp_path: Path) -> None:
        path = tmp_path / "auth.yml"
        path.write_text("driver: token\n")
        assert load_config_file(path) == {"driver": "token"}

    def test_json(self, tmp_path: Path) -> None:
        path = tmp_path / "grading.json"
        path.write_text(json.dumps({"pass_mark": 50}))
        assert load_config_file(path) == {"pass_mark": 50}

    @pytest.mark.parametrize("filename", ["empty.yaml", "empty.json"])
    def test_empty_file(self, tmp_path: Path, filename: str) -> None:
        path = tmp_path / filename
        path.write_text("")
        assert load_config_file(path) == {}

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "auth.yaml"
        path.write_text("{{invalid yaml:")
        with pytest.raises(ConfigError):
            load_config_file(path)

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "auth.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            load_config_file(path)

    def test_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "auth.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigError, match="mapping"):
            load_config_file(path)

    def test_unsupported_extension(self, tmp_path: Path) -> None:
        path = tmp_path / "auth.php"
        path.write_text("<?php return [];")
        with pytest.raises(ConfigError, match="Unsupported"):
            load_config_file(path)


# === InMemoryHost ===


class TestInMemoryHost:
    def test_merge_config_sets_key(self, tmp_path: Path) -> None:
        path = tmp_path / "auth.yaml"
        path.write_text("driver: session\n")
        host = InMemoryHost()
        host.merge_config(path, "auth")
        assert host.config.get("auth.driver") == "session"
        assert host.calls == [("merge_config", path, "auth")]

    def test_app_config_wins_over_module_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "auth.yaml"
        path.write_text("driver: session\nlifetime: 120\n")
        host = InMemoryHost(Config({"auth": {"lifetime": 30}}))
        host.merge_config(path, "auth")
        assert host.config.get("auth") == {"driver": "session", "lifetime": 30}

    def test_app_scalar_wins(self, tmp_path: Path) -> None:
        path = tmp_path / "auth.yaml"
        path.write_text("driver: session\n")
        host = InMemoryHost(Config({"auth": "disabled"}))
        host.merge_config(path, "auth")
        assert host.config.get("auth") == "disabled"

    def test_later_module_file_replaces_earlier(self, tmp_path: Path) -> None:
        first = tmp_path / "first.yaml"
        first.write_text("driver: session\nlifetime: 120\n")
        second = tmp_path / "second.yaml"
        second.write_text("driver: token\n")
        host = InMemoryHost()
        host.merge_config(first, "auth")
        host.merge_config(second, "auth")
        assert host.config.get("auth") == {"driver": "token"}

    def test_records_routes_migrations_views(self, tmp_path: Path) -> None:
        host = InMemoryHost()
        host.load_routes(tmp_path / "web.py")
        host.register_migrations(tmp_path / "migrations")
        host.register_views(tmp_path / "views", "Learning_Course")
        assert host.route_files == [tmp_path / "web.py"]
        assert host.migration_dirs == [tmp_path / "migrations"]
        assert host.view_paths == {"Learning_Course": tmp_path / "views"}
        assert [c[0] for c in host.calls] == ["load_routes", "register_migrations", "register_views"]

    def test_view_namespace_reregistered_warns(self, tmp_path: Path, caplog) -> None:
        host = InMemoryHost()
        host.register_views(tmp_path / "a", "Course")
        host.register_views(tmp_path / "b", "Course")
        assert host.view_paths["Course"] == tmp_path / "b"
        assert "re-registered" in caplog.text

    def test_hooks_bound_to_host(self) -> None:
        host = InMemoryHost()
        hooks = host.hooks()
        assert hooks.merge_config == host.merge_config
        assert hooks.register_views == host.register_views
        assert host.hooks(views=False).register_views is None


class TestInMemoryHostWithRegistry:
    def test_bootstrap_populates_host(self, lms_tree: Path) -> None:
        host = InMemoryHost(Config({"user": {"per_page": 50}}))
        ModuleRegistry(modules_dir=lms_tree, views=True).bootstrap(host.hooks())

        assert host.config.get("user.per_page") == 50
        assert host.config.get("grading.pass_mark") == 50
        assert host.route_files == [
            lms_tree / "Learning" / "Course" / "routes" / "web.py",
            lms_tree / "Learning" / "Course" / "routes" / "api.py",
        ]
        assert host.migration_dirs == [
            lms_tree / "Core" / "Auth" / "database" / "migrations",
            lms_tree / "Core" / "User" / "database" / "migrations",
            lms_tree / "Learning" / "Course" / "database" / "migrations",
        ]
        assert set(host.view_paths) == {"Learning_Course"}

    def test_unparseable_module_config_aborts(self, modules_root: Path, make_module) -> None:
        make_module(modules_root, "User", config={"auth.yaml": "{{invalid yaml:"}, routes=("web.py",))
        host = InMemoryHost()
        with pytest.raises(ConfigError):
            ModuleRegistry(modules_dir=modules_root).bootstrap(host.hooks())
        assert host.route_files == []
