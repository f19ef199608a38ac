"""Exception types shared by the registry, config and migration layers."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ironbackend.schemas.config import ConfigIssue


class IronBackendError(Exception):
    """Base class for every error raised by ironbackend."""


class RegistryLookupError(IronBackendError, LookupError):
    """A required identifier has no registry entry."""

    kind = "entry"

    def __init__(self, identifier: str, available: list[str] | None = None) -> None:
        self.identifier = identifier
        self.available = available or []
        message = f"Unknown {self.kind}: {identifier}"
        if self.available:
            message += f" (available: {', '.join(self.available)})"
        super().__init__(message)


class UnknownStyleError(RegistryLookupError):
    kind = "style"


class UnknownStackError(RegistryLookupError):
    kind = "stack"


class UnknownToolError(RegistryLookupError):
    kind = "AI tool"


class ConfigValidationError(IronBackendError, ValueError):
    """A config object failed schema validation.

    ``issues`` holds one ``ConfigIssue`` per violation, in the order the
    fields are declared on the schema.
    """

    def __init__(self, issues: list[ConfigIssue], *, prefix: str = "Config validation failed") -> None:
        from ironbackend.schemas.config import format_validation_error

        self.issues = list(issues)
        super().__init__(f"{prefix}:\n{format_validation_error(self.issues)}")


class ConfigNotFoundError(IronBackendError, FileNotFoundError):
    """The project has no .ironbackend/config.json."""


class ConfigFormatError(IronBackendError, ValueError):
    """config.json exists but is not a JSON object."""


class MigrationError(IronBackendError):
    """Base class for config migration failures."""


class MigrationGapError(MigrationError):
    """The migration chain stops before reaching the target version."""

    def __init__(self, reached: str, target: str) -> None:
        self.reached = reached
        self.target = target
        super().__init__(
            f"No migration registered from version {reached}; cannot reach {target}"
        )


class MigrationChainError(MigrationError):
    """The registered migrations do not form a single contiguous chain."""


class PathTraversalError(IronBackendError, ValueError):
    """A user-supplied path resolves outside its base directory."""
