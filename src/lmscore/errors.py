"""Error hierarchy for the lmscore bootstrap."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

__all__ = [
    "LmsError",
    "FilesystemError",
    "ConfigNotFoundError",
    "ConfigError",
    "ConfigKeyCollisionError",
    "ModuleBootError",
    "InvalidInputError",
    "ErrorCodes",
]


class LmsError(Exception):
    """Base error for all lmscore errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class FilesystemError(LmsError):
    """Raised when an existing directory cannot be listed or read."""

    def __init__(self, path: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="FILESYSTEM_ERROR",
            message=f"Cannot read {path}: {reason}",
            details={"path": path, "reason": reason},
            **kwargs,
        )

    @property
    def path(self) -> str:
        """The directory that could not be read."""
        return self.details["path"]


class ConfigNotFoundError(LmsError):
    """Raised when a configuration file cannot be found."""

    def __init__(self, config_path: str, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_NOT_FOUND",
            message=f"Configuration file not found: {config_path}",
            details={"config_path": config_path},
            **kwargs,
        )


class ConfigError(LmsError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(code="CONFIG_INVALID", message=message, **kwargs)


class ConfigKeyCollisionError(LmsError):
    """Raised when two config files claim the same configuration key."""

    def __init__(
        self,
        key: str,
        first_module: str,
        second_module: str,
        existing_key: str | None = None,
        **kwargs: Any,
    ) -> None:
        existing_key = existing_key or key
        if existing_key == key:
            message = f"Config key '{key}' registered by module '{second_module}' is already owned by module '{first_module}'"
        else:
            message = (
                f"Config key '{key}' registered by module '{second_module}' "
                f"overlaps key '{existing_key}' owned by module '{first_module}'"
            )
        super().__init__(
            code="CONFIG_KEY_COLLISION",
            message=message,
            details={
                "key": key,
                "existing_key": existing_key,
                "first_module": first_module,
                "second_module": second_module,
            },
            **kwargs,
        )

    @property
    def key(self) -> str:
        """The colliding configuration key."""
        return self.details["key"]

    @property
    def existing_key(self) -> str:
        """The already-registered key it collides with (equal to ``key`` or a dot-path prefix/extension of it)."""
        return self.details["existing_key"]

    @property
    def first_module(self) -> str:
        """The module that registered the key first."""
        return self.details["first_module"]

    @property
    def second_module(self) -> str:
        """The module whose registration collided."""
        return self.details["second_module"]


class ModuleBootError(LmsError):
    """Raised when a host hook or module provider fails during startup."""

    def __init__(self, module_name: str, phase: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="MODULE_BOOT_ERROR",
            message=f"Module '{module_name}' failed during {phase} phase: {reason}",
            details={"module_name": module_name, "phase": phase, "reason": reason},
            **kwargs,
        )

    @property
    def module_name(self) -> str:
        """The module being registered when the failure happened."""
        return self.details["module_name"]

    @property
    def phase(self) -> str:
        """Either 'register' or 'boot'."""
        return self.details["phase"]


class InvalidInputError(LmsError):
    """Raised for invalid input."""

    def __init__(self, message: str = "Invalid input", **kwargs: Any) -> None:
        super().__init__(code="GENERAL_INVALID_INPUT", message=message, **kwargs)


class ErrorCodes:
    """All lmscore error codes as constants.

    Example:
        if error.code == ErrorCodes.CONFIG_KEY_COLLISION:
            report_duplicate_key(error.details["key"])
    """

    FILESYSTEM_ERROR = "FILESYSTEM_ERROR"
    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    CONFIG_INVALID = "CONFIG_INVALID"
    CONFIG_KEY_COLLISION = "CONFIG_KEY_COLLISION"
    MODULE_BOOT_ERROR = "MODULE_BOOT_ERROR"
    GENERAL_INVALID_INPUT = "GENERAL_INVALID_INPUT"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ErrorCodes is immutable")
