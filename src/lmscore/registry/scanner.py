"""Directory scanner for discovering feature modules under a modules root."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator

from lmscore.errors import FilesystemError, InvalidInputError
from lmscore.registry.types import ModuleDescriptor

logger = logging.getLogger(__name__)

__all__ = ["discover_modules", "describe_module", "TRAVERSALS", "RESOURCE_DIR_NAMES"]

TRAVERSALS = ("flat", "nested")

# Folders holding a module's own assets; never offered as nested modules.
RESOURCE_DIR_NAMES = frozenset({"config", "routes", "database", "resources"})

_SKIP_DIR_NAMES = {"__pycache__", "node_modules"}


def discover_modules(
    root: str | Path,
    traversal: str = "nested",
    route_extensions: Iterable[str] = (".py",),
    follow_symlinks: bool = False,
) -> Iterator[ModuleDescriptor]:
    """Discover feature modules under ``root``.

    With ``flat`` traversal every immediate subdirectory of ``root`` is a
    module. With ``nested`` traversal every immediate subdirectory is a
    namespace that is itself yielded as a module, followed by each of its
    own subdirectories.

    ``follow_symlinks`` applies uniformly: when off, symlinked module
    directories are skipped and symlinked resources (``config/``,
    ``routes/web.py``, ...) are treated as absent.

    Descriptors are produced lazily in directory-listing order. Sort by
    ``name`` when a stable order matters.

    Raises:
        InvalidInputError: If ``traversal`` is not a known policy.
        FilesystemError: If ``root`` is not a directory, or a directory
            cannot be listed while iterating.
    """
    if traversal not in TRAVERSALS:
        raise InvalidInputError(
            message=f"Invalid traversal '{traversal}'. Must be one of: {', '.join(TRAVERSALS)}"
        )
    route_extensions = tuple(route_extensions)

    root = Path(root).resolve()
    if not root.exists():
        logger.info("Modules root %s does not exist, no modules to discover", root)
        return iter(())
    if not _is_dir(root):
        raise FilesystemError(path=str(root), reason="not a directory")

    return _walk(root, traversal, route_extensions, follow_symlinks)


def _walk(
    root: Path,
    traversal: str,
    route_extensions: tuple[str, ...],
    follow_symlinks: bool,
) -> Iterator[ModuleDescriptor]:
    for namespace_dir in _list_subdirs(root, follow_symlinks):
        yield describe_module(root, namespace_dir, route_extensions, follow_symlinks)
        if traversal != "nested":
            continue
        for module_dir in _list_subdirs(namespace_dir, follow_symlinks):
            if module_dir.name in RESOURCE_DIR_NAMES:
                continue
            yield describe_module(root, module_dir, route_extensions, follow_symlinks)


def describe_module(
    root: Path,
    module_dir: Path,
    route_extensions: Iterable[str] = (".py",),
    follow_symlinks: bool = False,
) -> ModuleDescriptor:
    """Build the descriptor for ``module_dir`` from presence checks alone.

    Unless ``follow_symlinks`` is set, a resource reached through a symlink
    anywhere below ``module_dir`` counts as absent.
    """
    route_extensions = tuple(route_extensions)
    descriptor = ModuleDescriptor(
        path=module_dir,
        name=module_dir.relative_to(root).as_posix(),
        config_dir=_dir_or_none(module_dir, ("config",), follow_symlinks),
        web_routes=_find_route_file(module_dir, "web", route_extensions, follow_symlinks),
        api_routes=_find_route_file(module_dir, "api", route_extensions, follow_symlinks),
        migrations_dir=_dir_or_none(module_dir, ("database", "migrations"), follow_symlinks),
        views_dir=_dir_or_none(module_dir, ("resources", "views"), follow_symlinks),
    )
    logger.debug("Discovered module '%s' at %s", descriptor.name, module_dir)
    return descriptor


def _list_subdirs(dir_path: Path, follow_symlinks: bool) -> list[Path]:
    try:
        entries = list(os.scandir(dir_path))
    except OSError as e:
        logger.error("Cannot list %s: %s", dir_path, e)
        raise FilesystemError(path=str(dir_path), reason=str(e), cause=e) from e

    subdirs: list[Path] = []
    for entry in entries:
        name = entry.name
        if name.startswith(".") or name.startswith("_"):
            continue
        if name in _SKIP_DIR_NAMES:
            continue
        try:
            is_dir = entry.is_dir(follow_symlinks=follow_symlinks)
        except OSError as e:
            logger.error("OS error accessing %s: %s", entry.path, e)
            raise FilesystemError(path=entry.path, reason=str(e), cause=e) from e
        if is_dir:
            subdirs.append(Path(entry.path))
    return subdirs


def _find_route_file(
    module_dir: Path,
    stem: str,
    extensions: tuple[str, ...],
    follow_symlinks: bool,
) -> Path | None:
    routes_dir = _dir_or_none(module_dir, ("routes",), follow_symlinks)
    if routes_dir is None:
        return None
    for ext in extensions:
        candidate = routes_dir / f"{stem}{ext}"
        if not follow_symlinks and _is_symlink(candidate):
            continue
        if _is_file(candidate):
            return candidate
    return None


def _dir_or_none(module_dir: Path, parts: tuple[str, ...], follow_symlinks: bool) -> Path | None:
    path = module_dir
    for part in parts:
        path = path / part
        if not follow_symlinks and _is_symlink(path):
            return None
    return path if _is_dir(path) else None


def _is_dir(path: Path) -> bool:
    try:
        return path.is_dir()
    except OSError as e:
        raise FilesystemError(path=str(path), reason=str(e), cause=e) from e


def _is_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError as e:
        raise FilesystemError(path=str(path), reason=str(e), cause=e) from e


def _is_symlink(path: Path) -> bool:
    try:
        return path.is_symlink()
    except OSError as e:
        raise FilesystemError(path=str(path), reason=str(e), cause=e) from e
