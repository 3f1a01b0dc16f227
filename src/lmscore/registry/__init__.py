"""lmscore module registry and discovery system.

Discovers feature modules under a modules root and registers their config,
routes, migrations and views with a host application.

Usage::

    from lmscore.registry import ModuleRegistry

    registry = ModuleRegistry(modules_dir="./app/Modules")
    result = registry.bootstrap(host.hooks())
"""

from __future__ import annotations

from lmscore.registry.registry import ModuleRegistry
from lmscore.registry.scanner import describe_module, discover_modules
from lmscore.registry.types import BootstrapResult, HostRegistrationHooks, ModuleDescriptor
from lmscore.registry.validation import validate_provider

__all__ = [
    "BootstrapResult",
    "HostRegistrationHooks",
    "ModuleDescriptor",
    "ModuleRegistry",
    "describe_module",
    "discover_modules",
    "validate_provider",
]
