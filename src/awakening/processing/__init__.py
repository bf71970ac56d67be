"""Processing lifecycle (pending -> processed / skipped)."""

from .state_machine import (
    ALLOWED_TRANSITIONS,
    can_transition,
    check_transition,
    transition,
    with_status,
)

__all__ = ["ALLOWED_TRANSITIONS", "can_transition", "check_transition", "transition", "with_status"]
