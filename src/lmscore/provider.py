"""Module providers: per-module setup run during the register and boot phases."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lmscore.registry.types import HostRegistrationHooks, ModuleDescriptor

__all__ = ["ModuleProvider"]


class ModuleProvider:
    """Base class for module-specific setup hooks.

    Providers are mapped to module names up front and handed to the
    :class:`~lmscore.registry.ModuleRegistry`; there is no lookup by class
    name at runtime. Any object with ``register_services`` and/or
    ``boot_services`` methods of the same signature is accepted.

    Example::

        class CourseProvider(ModuleProvider):
            def boot_services(self, descriptor, hooks):
                scheduler.add_job(expire_enrollments)

        registry = ModuleRegistry(providers={"Learning/Course": CourseProvider()})
    """

    def register_services(self, descriptor: ModuleDescriptor, hooks: HostRegistrationHooks) -> None:
        """Called after this module's config is merged, before any module boots."""

    def boot_services(self, descriptor: ModuleDescriptor, hooks: HostRegistrationHooks) -> None:
        """Called after this module's routes, migrations and views are registered."""
