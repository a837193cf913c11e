"""Errors raised while loading and validating watches."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import GroupVersionKind


class WatchesError(Exception):
    """Base class for watches loading failures."""

    pass


class WatchesParseError(WatchesError):
    """Raised when the watches document or one of its fields cannot be decoded."""

    pass


class DurationParseError(WatchesParseError):
    """Raised when a duration string is not a valid duration expression."""

    def __init__(self, value: str, message: str | None = None):
        self.value = value
        super().__init__(message or f"failed to parse '{value}' as a duration")


class InvalidGVKError(WatchesError):
    """Raised when a GroupVersionKind is missing its version or kind."""

    pass


class AnsiblePathError(WatchesError):
    """Raised when a playbook or role path is missing, relative or not found."""

    pass


class FinalizerError(WatchesError):
    """Raised when a finalizer has no name or no usable automation."""

    pass


class DuplicateGVKError(WatchesError):
    """Raised when two watches share the same GroupVersionKind."""

    def __init__(self, gvk: GroupVersionKind):
        self.gvk = gvk
        super().__init__(f"duplicate GVK: {gvk}")
