"""lmscore - Module discovery and registration bootstrap for the LMS."""

from __future__ import annotations

# Core
from lmscore.registry import ModuleRegistry
from lmscore.registry.types import BootstrapResult, HostRegistrationHooks, ModuleDescriptor
from lmscore.bootstrap import bootstrap
from lmscore.provider import ModuleProvider

# Host
from lmscore.host import InMemoryHost

# Config
from lmscore.config import Config, ModulesSettings

# Errors
from lmscore.errors import (
    ConfigError,
    ConfigKeyCollisionError,
    ConfigNotFoundError,
    ErrorCodes,
    FilesystemError,
    InvalidInputError,
    LmsError,
    ModuleBootError,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "ModuleRegistry",
    "ModuleDescriptor",
    "HostRegistrationHooks",
    "BootstrapResult",
    "ModuleProvider",
    "bootstrap",
    # Host
    "InMemoryHost",
    # Config
    "Config",
    "ModulesSettings",
    # Errors
    "ErrorCodes",
    "LmsError",
    "FilesystemError",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigKeyCollisionError",
    "ModuleBootError",
    "InvalidInputError",
]
