"""
Exception classes for the versioning module.
"""

from typing import Iterable, Optional


class VersioningError(Exception):
    """Base exception for all versioning-related errors."""

    pass


class MissingVersionError(VersioningError):
    """Raised when a project identifier carries no nominal version."""

    def __init__(self, identifier):
        self.identifier = identifier
        super().__init__(f"Project {identifier} has no version, skipping resolution")


class MissingPlaceholderError(VersioningError):
    """Raised when a version format references an undefined context key."""

    def __init__(
        self, key: str, template: str, available: Optional[Iterable[str]] = None
    ):
        self.key = key
        self.template = template
        self.available = sorted(available) if available is not None else []
        message = f"Unresolved placeholder '${{{key}}}' in version format '{template}'."
        if self.available:
            message += f" Available: {', '.join(self.available)}"
        super().__init__(message)


class RepositoryAccessError(VersioningError):
    """Raised when the git repository cannot be opened or queried."""

    def __init__(self, path, reason: str = ""):
        self.path = path
        self.reason = reason
        if reason:
            super().__init__(f"Cannot read git repository at {path}: {reason}")
        else:
            super().__init__(f"Cannot read git repository at {path}")


class ConfigurationError(VersioningError):
    """Raised when the versioning configuration is invalid or unreadable."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        if source:
            super().__init__(f"Invalid versioning configuration {source}: {message}")
        else:
            super().__init__(f"Invalid versioning configuration: {message}")
