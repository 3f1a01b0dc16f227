"""Registry types: ModuleDescriptor, HostRegistrationHooks, BootstrapResult."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable

from lmscore.errors import FilesystemError

__all__ = [
    "ModuleDescriptor",
    "HostRegistrationHooks",
    "BootstrapResult",
]


@dataclass(frozen=True)
class ModuleDescriptor:
    """A discovered feature module and the optional resources it carries.

    Built only by the scanner from filesystem presence checks.
    """

    path: Path
    name: str
    config_dir: Path | None = None
    web_routes: Path | None = None
    api_routes: Path | None = None
    migrations_dir: Path | None = None
    views_dir: Path | None = None

    @property
    def has_web_routes(self) -> bool:
        return self.web_routes is not None

    @property
    def has_api_routes(self) -> bool:
        return self.api_routes is not None

    @property
    def view_namespace(self) -> str:
        """View namespace for this module, e.g. ``Learning/Course`` -> ``Learning_Course``."""
        return self.name.replace("/", "_")

    def config_files(self, extensions: Iterable[str], follow_symlinks: bool = False) -> list[Path]:
        """List config files directly inside ``config/``, sorted by filename.

        Only regular files whose suffix is in ``extensions`` are returned.
        Subdirectories are not searched. Symlinked files are skipped unless
        ``follow_symlinks`` is set.

        Raises:
            FilesystemError: If ``config/`` exists but cannot be listed.
        """
        if self.config_dir is None:
            return []

        wanted = {ext.lower() for ext in extensions}
        try:
            entries = list(os.scandir(self.config_dir))
        except OSError as e:
            raise FilesystemError(path=str(self.config_dir), reason=str(e), cause=e) from e

        files: list[Path] = []
        for entry in entries:
            if entry.name.startswith("."):
                continue
            try:
                is_file = entry.is_file(follow_symlinks=follow_symlinks)
            except OSError as e:
                raise FilesystemError(path=entry.path, reason=str(e), cause=e) from e
            if is_file and Path(entry.name).suffix.lower() in wanted:
                files.append(Path(entry.path))
        return sorted(files, key=lambda p: p.name)


@dataclass
class HostRegistrationHooks:
    """The registration capabilities a host application exposes to the bootstrap.

    ``register_views`` is optional; leave it ``None`` when the host has no
    view layer.
    """

    merge_config: Callable[[Path, str], None]
    load_routes: Callable[[Path], None]
    register_migrations: Callable[[Path], None]
    register_views: Callable[[Path, str], None] | None = None


@dataclass
class BootstrapResult:
    """Summary of what a bootstrap pass registered with the host."""

    modules: list[str] = field(default_factory=list)
    config_keys: dict[str, str] = field(default_factory=dict)
    route_files: list[Path] = field(default_factory=list)
    migration_dirs: list[Path] = field(default_factory=list)
    view_namespaces: list[str] = field(default_factory=list)

    @property
    def module_count(self) -> int:
        return len(self.modules)
