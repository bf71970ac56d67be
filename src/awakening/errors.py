"""
Resource error taxonomy.

Fatal (programmer or pathological input):
- UnknownKindError: kind outside the registry
- SlugCollisionExhaustedError: no free slug within the attempt budget

Recoverable:
- MalformedLinkError: link entry dropped, reported as a warning
- VersionConflictError: re-fetch the resource and retry
- SlugConflictError: raised by stores on a slug unique-constraint hit

User-facing:
- IncompleteResourceError: blocks the processed transition, lists missing fields
- InvariantViolationError: structural violations reject a write wholesale
- InvalidTransitionError, ImmutableFieldError, ResourceNotFoundError
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .validation import Violation


class ResourceError(Exception):
    """Base class for all resource core errors."""


class UnknownKindError(ResourceError):
    """Kind is not part of the closed registry."""

    def __init__(self, kind: Any):
        self.kind = kind
        super().__init__(f"Unknown resource kind: {kind!r}")


class MalformedLinkError(ResourceError):
    """A link entry could not be turned into an absolute URL."""

    def __init__(self, raw: Any, reason: str, label: str = "Website"):
        self.raw = raw
        self.reason = reason
        self.label = label
        super().__init__(f"Dropped malformed link {raw!r}: {reason}")


class IncompleteResourceError(ResourceError):
    """Resource lacks required fields for its kind."""

    def __init__(self, resource_id: Any, missing_fields: list[str]):
        self.resource_id = resource_id
        self.missing_fields = list(missing_fields)
        super().__init__(
            f"Resource {resource_id} is missing required fields: {', '.join(self.missing_fields)}"
        )


class SlugCollisionExhaustedError(ResourceError):
    """No unique slug could be allocated."""

    def __init__(self, base: str, attempts: int):
        self.base = base
        self.attempts = attempts
        if base:
            message = f"No free slug for {base!r} after {attempts} attempts"
        else:
            message = "Cannot derive a slug from an empty title"
        super().__init__(message)


class SlugConflictError(ResourceError):
    """Store rejected a create because the slug is already taken."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Slug already taken: {slug}")


class VersionConflictError(ResourceError):
    """Compare-and-set failed because the stored version moved on."""

    def __init__(self, resource_id: Any, expected_version: int, actual_version: int | None = None):
        self.resource_id = resource_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Resource {resource_id} version conflict: expected {expected_version}, "
            f"found {actual_version}"
        )


class ResourceNotFoundError(ResourceError):
    """No resource with the given id."""

    def __init__(self, resource_id: Any):
        self.resource_id = resource_id
        super().__init__(f"Resource not found: {resource_id}")


class InvalidTransitionError(ResourceError):
    """Status transition not allowed by the processing state machine."""

    def __init__(self, current: Any, target: Any):
        self.current = current
        self.target = target
        super().__init__(f"Cannot transition resource from {current} to {target}")


class ImmutableFieldError(ResourceError):
    """Attempt to change a field that is fixed after creation."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Field {field!r} cannot be changed after creation")


class InvariantViolationError(ResourceError):
    """Write rejected because it would persist structural violations."""

    def __init__(self, violations: list["Violation"]):
        self.violations = list(violations)
        codes = ", ".join(f"{v.code}@{v.path}" for v in self.violations)
        super().__init__(f"Write rejected, structural violations: {codes}")
