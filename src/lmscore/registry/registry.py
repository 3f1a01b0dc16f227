"""Module registry: discovers feature modules and registers their assets with a host."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Iterator

from lmscore.config import ModulesSettings
from lmscore.errors import (
    ConfigKeyCollisionError,
    InvalidInputError,
    LmsError,
    ModuleBootError,
)
from lmscore.registry.scanner import discover_modules
from lmscore.registry.types import BootstrapResult, HostRegistrationHooks, ModuleDescriptor
from lmscore.registry.validation import validate_provider

if TYPE_CHECKING:
    from lmscore.config import Config

logger = logging.getLogger(__name__)

__all__ = ["ModuleRegistry"]


class ModuleRegistry:
    """Discovers feature modules and registers their assets with a host application."""

    def __init__(
        self,
        config: Config | None = None,
        modules_dir: str | Path | None = None,
        traversal: str | None = None,
        views: bool | None = None,
        config_collision: str | None = None,
        providers: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the ModuleRegistry.

        Explicit arguments take precedence over the ``modules`` section of
        ``config``, which takes precedence over defaults.

        Args:
            config: Optional Config object with a ``modules`` section.
            modules_dir: Modules root directory.
            traversal: ``"flat"`` or ``"nested"``.
            views: Whether view directories are registered.
            config_collision: ``"error"`` or ``"warn"``.
            providers: Mapping of module name (e.g. ``"Learning/Course"``) to
                a module provider instance.

        Raises:
            ConfigError: If the resulting settings are invalid.
            InvalidInputError: If a provider does not implement the provider interface.
        """
        self._settings = ModulesSettings.from_config(
            config,
            root=str(modules_dir) if modules_dir is not None else None,
            traversal=traversal,
            views=views,
            config_collision=config_collision,
        )

        self._providers: dict[str, Any] = dict(providers or {})
        for name, provider in self._providers.items():
            errors = validate_provider(provider)
            if errors:
                raise InvalidInputError(message=f"Invalid provider for module '{name}': {'; '.join(errors)}")

        # Config key -> name of the module that registered it
        self._config_owners: dict[str, str] = {}

    @property
    def settings(self) -> ModulesSettings:
        """The resolved discovery and registration settings."""
        return self._settings

    # ----- Discovery -----

    def discover(self, root: str | Path | None = None) -> Iterator[ModuleDescriptor]:
        """Discover modules under ``root`` (defaults to the configured modules root)."""
        return discover_modules(
            root if root is not None else self._settings.root,
            traversal=self._settings.traversal,
            route_extensions=self._settings.route_extensions,
            follow_symlinks=self._settings.follow_symlinks,
        )

    # ----- Per-asset registration -----

    def register_config(self, descriptor: ModuleDescriptor, merge: Callable[[Path, str], None]) -> list[str]:
        """Merge each config file of ``descriptor`` under a key named after the file.

        Returns the keys merged, in filename order.

        Raises:
            ConfigKeyCollisionError: If a key is already owned and the
                collision policy is ``"error"``.
        """
        keys: list[str] = []
        for path in descriptor.config_files(
            self._settings.config_extensions,
            follow_symlinks=self._settings.follow_symlinks,
        ):
            key = path.stem
            self._claim_config_key(key, descriptor.name)
            merge(path, key)
            logger.debug("Merged config '%s' from module '%s'", key, descriptor.name)
            keys.append(key)
        return keys

    def register_routes(self, descriptor: ModuleDescriptor, load_routes: Callable[[Path], None]) -> list[Path]:
        """Load the module's ``web`` then ``api`` route files, whichever exist."""
        loaded: list[Path] = []
        for path in (descriptor.web_routes, descriptor.api_routes):
            if path is None:
                continue
            load_routes(path)
            logger.debug("Loaded routes %s for module '%s'", path.name, descriptor.name)
            loaded.append(path)
        return loaded

    def register_migrations(
        self, descriptor: ModuleDescriptor, register_dir: Callable[[Path], None]
    ) -> Path | None:
        """Register the module's migrations directory, if present."""
        if descriptor.migrations_dir is None:
            return None
        register_dir(descriptor.migrations_dir)
        logger.debug("Registered migrations for module '%s'", descriptor.name)
        return descriptor.migrations_dir

    def register_views(
        self, descriptor: ModuleDescriptor, register_views: Callable[[Path, str], None]
    ) -> str | None:
        """Register the module's views directory under its view namespace, if present."""
        if descriptor.views_dir is None:
            return None
        namespace = descriptor.view_namespace
        register_views(descriptor.views_dir, namespace)
        logger.debug("Registered views for module '%s' as '%s'", descriptor.name, namespace)
        return namespace

    # ----- Lifecycle phases -----

    def register_module(
        self,
        descriptor: ModuleDescriptor,
        hooks: HostRegistrationHooks,
        result: BootstrapResult | None = None,
    ) -> None:
        """Run the register phase for one module: config merge, then provider setup.

        Raises:
            ModuleBootError: If a host hook or the provider raises.
        """
        with _phase("register", descriptor):
            keys = self.register_config(descriptor, hooks.merge_config)
            provider = self._providers.get(descriptor.name)
            if provider is not None and hasattr(provider, "register_services"):
                provider.register_services(descriptor, hooks)

        if result is not None:
            for key in keys:
                result.config_keys[key] = descriptor.name

    def boot_module(
        self,
        descriptor: ModuleDescriptor,
        hooks: HostRegistrationHooks,
        result: BootstrapResult | None = None,
    ) -> None:
        """Run the boot phase for one module: routes, migrations, views, then provider setup.

        Raises:
            InvalidInputError: If views are enabled but ``hooks`` has no views hook.
            ModuleBootError: If a host hook or the provider raises.
        """
        self._check_hooks(hooks)
        with _phase("boot", descriptor):
            routes = self.register_routes(descriptor, hooks.load_routes)
            migrations = self.register_migrations(descriptor, hooks.register_migrations)
            namespace = None
            if self._settings.views:
                namespace = self.register_views(descriptor, hooks.register_views)
            provider = self._providers.get(descriptor.name)
            if provider is not None and hasattr(provider, "boot_services"):
                provider.boot_services(descriptor, hooks)

        if result is not None:
            result.route_files.extend(routes)
            if migrations is not None:
                result.migration_dirs.append(migrations)
            if namespace is not None:
                result.view_namespaces.append(namespace)

    def bootstrap(self, hooks: HostRegistrationHooks, root: str | Path | None = None) -> BootstrapResult:
        """Discover all modules and register them with the host in two phases.

        Modules are processed in name order. Every module's register phase
        completes before any module's boot phase starts. Descriptors are not
        kept once this returns.

        Raises:
            FilesystemError: If a modules directory cannot be read.
            ConfigKeyCollisionError: On a duplicate config key under the ``"error"`` policy.
            ModuleBootError: If a host hook or provider fails.
            InvalidInputError: If views are enabled but ``hooks`` has no views hook.
        """
        self._check_hooks(hooks)
        self._config_owners = {}

        descriptors = sorted(self.discover(root), key=lambda d: d.name)
        names = [d.name for d in descriptors]

        for orphan in sorted(set(self._providers) - set(names)):
            logger.warning("Provider registered for unknown module '%s', skipping", orphan)

        result = BootstrapResult(modules=names)

        for descriptor in descriptors:
            self.register_module(descriptor, hooks, result)
        result.config_keys = dict(self._config_owners)
        logger.info("Register phase complete: %d modules, %d config keys", len(names), len(result.config_keys))

        for descriptor in descriptors:
            self.boot_module(descriptor, hooks, result)
        logger.info(
            "Boot phase complete: %d route files, %d migration dirs, %d view dirs",
            len(result.route_files),
            len(result.migration_dirs),
            len(result.view_namespaces),
        )

        return result

    # ----- Internals -----

    def _claim_config_key(self, key: str, module_name: str) -> None:
        # Keys are dot-paths on the host, so "auth" and "auth.local" share a subtree.
        overlapping = [
            claimed
            for claimed in self._config_owners
            if claimed == key or claimed.startswith(f"{key}.") or key.startswith(f"{claimed}.")
        ]
        for claimed in overlapping:
            owner = self._config_owners[claimed]
            if self._settings.config_collision == "error":
                raise ConfigKeyCollisionError(
                    key=key,
                    first_module=owner,
                    second_module=module_name,
                    existing_key=claimed,
                )
            logger.warning(
                "Config key '%s' from module '%s' overrides '%s' registered by '%s'",
                key,
                module_name,
                claimed,
                owner,
            )
            del self._config_owners[claimed]
        self._config_owners[key] = module_name

    def _check_hooks(self, hooks: HostRegistrationHooks) -> None:
        if self._settings.views and hooks.register_views is None:
            raise InvalidInputError(message="View registration is enabled but no register_views hook was given")


@contextmanager
def _phase(phase: str, descriptor: ModuleDescriptor) -> Iterator[None]:
    """Wrap non-lmscore exceptions raised inside a lifecycle phase in ModuleBootError."""
    try:
        yield
    except LmsError:
        raise
    except Exception as e:
        raise ModuleBootError(
            module_name=descriptor.name,
            phase=phase,
            reason=str(e),
            cause=e,
        ) from e
