"""
Awakening directory - resource core.

Typed, normalized and validated directory resources (books, podcasts,
retreat centers, ...) with a moderation workflow on top.
"""

from .errors import (
    ImmutableFieldError,
    IncompleteResourceError,
    InvalidTransitionError,
    InvariantViolationError,
    MalformedLinkError,
    ResourceError,
    ResourceNotFoundError,
    SlugCollisionExhaustedError,
    SlugConflictError,
    UnknownKindError,
    VersionConflictError,
)
from .models import Resource, ResourceKind, ResourceStatus
from .normalization import normalize, prepare
from .registry import describe
from .serialization import from_legacy_document, to_public_document
from .validation import Violation, ViolationCode, validate

__version__ = "0.1.0"

__all__ = [
    "ImmutableFieldError",
    "IncompleteResourceError",
    "InvalidTransitionError",
    "InvariantViolationError",
    "MalformedLinkError",
    "Resource",
    "ResourceError",
    "ResourceKind",
    "ResourceNotFoundError",
    "ResourceStatus",
    "SlugCollisionExhaustedError",
    "SlugConflictError",
    "UnknownKindError",
    "VersionConflictError",
    "Violation",
    "ViolationCode",
    "describe",
    "from_legacy_document",
    "normalize",
    "prepare",
    "to_public_document",
    "validate",
]
