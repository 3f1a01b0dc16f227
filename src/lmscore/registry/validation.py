"""Module provider validation for the registry system."""

from __future__ import annotations

import inspect
from typing import Any

__all__ = ["validate_provider", "PROVIDER_HOOKS"]

PROVIDER_HOOKS = ("register_services", "boot_services")


def validate_provider(provider: Any) -> list[str]:
    """Validate that a provider implements the module provider interface.

    Providers must be instances, not classes. Returns a list of validation
    error strings. Empty list means valid.
    """
    if inspect.isclass(provider):
        return [f"Provider must be an instance, got class {provider.__name__}"]

    errors: list[str] = []
    present = 0
    for hook in PROVIDER_HOOKS:
        method = getattr(provider, hook, None)
        if method is None:
            continue
        present += 1
        if not callable(method):
            errors.append(f"{hook} must be callable")

    if present == 0:
        errors.append("Missing register_services or boot_services method")
    return errors
