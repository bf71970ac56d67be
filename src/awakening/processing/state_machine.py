"""
Processing State Machine.

    pending ──> processed   (only when the resource is complete for its kind)
    pending ──> skipped     (always, optional notes)
    processed ──> pending   (re-queue for corrections)
    skipped ──> pending     (re-queue)

processed and skipped never move directly into each other. The legacy
processed/skipped flags are written together with status on every transition.
"""

from typing import Optional

from ..errors import IncompleteResourceError, InvalidTransitionError
from ..models.entities import Resource, ResourceStatus
from ..validation import missing_required_fields

ALLOWED_TRANSITIONS: dict[ResourceStatus, frozenset[ResourceStatus]] = {
    ResourceStatus.PENDING: frozenset({ResourceStatus.PROCESSED, ResourceStatus.SKIPPED}),
    ResourceStatus.PROCESSED: frozenset({ResourceStatus.PENDING}),
    ResourceStatus.SKIPPED: frozenset({ResourceStatus.PENDING}),
}


def can_transition(current: ResourceStatus, target: ResourceStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def check_transition(current: ResourceStatus, target: ResourceStatus) -> None:
    """Raise InvalidTransitionError if current -> target is not allowed."""
    if not can_transition(current, target):
        raise InvalidTransitionError(current.value, target.value)


def with_status(resource: Resource, status: ResourceStatus) -> Resource:
    """Copy of resource with status and both legacy flags set as one value."""
    return resource.model_copy(
        update={
            "status": status,
            "processed": status is ResourceStatus.PROCESSED,
            "skipped": status is ResourceStatus.SKIPPED,
        }
    )


def transition(
    resource: Resource,
    target: ResourceStatus | str,
    notes: Optional[str] = None,
) -> Resource:
    """
    Apply a status transition to a resource.

    Pure: returns a new Resource, the input is left untouched.

    Args:
        resource: Resource in its current state (already normalized)
        target: Target status
        notes: Optional processing notes stored with the transition

    Raises:
        InvalidTransitionError: transition not in ALLOWED_TRANSITIONS
        IncompleteResourceError: target is processed and required fields are missing
    """
    target = ResourceStatus(target)
    check_transition(resource.status, target)

    if target is ResourceStatus.PROCESSED:
        missing = missing_required_fields(resource)
        if missing:
            raise IncompleteResourceError(resource.id, missing)

    updated = with_status(resource, target)
    if notes is not None:
        updated = updated.model_copy(update={"processing_notes": notes.strip() or None})
    return updated
