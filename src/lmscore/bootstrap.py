"""Process startup entry point for module registration."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from lmscore.config import Config
from lmscore.errors import LmsError
from lmscore.registry import ModuleRegistry
from lmscore.registry.types import BootstrapResult, HostRegistrationHooks

logger = logging.getLogger(__name__)

__all__ = ["bootstrap"]


def bootstrap(
    modules_root: str | Path | None,
    hooks: HostRegistrationHooks,
    config: Config | None = None,
    providers: dict[str, Any] | None = None,
    traversal: str | None = None,
    views: bool | None = None,
    config_collision: str | None = None,
) -> BootstrapResult:
    """Discover every module under ``modules_root`` and register it with the host.

    Meant to be called exactly once at process startup. ``modules_root`` of
    ``None`` falls back to ``modules.root`` from ``config``. Any error is
    fatal: it is logged and re-raised so the process can exit non-zero.
    """
    try:
        registry = ModuleRegistry(
            config=config,
            modules_dir=modules_root,
            traversal=traversal,
            views=views,
            config_collision=config_collision,
            providers=providers,
        )
        logger.info(
            "Bootstrapping modules from %s (%s traversal)",
            registry.settings.root,
            registry.settings.traversal,
        )
        return registry.bootstrap(hooks)
    except LmsError as e:
        logger.error("Module bootstrap failed: %s", e)
        raise
