"""Meeting lifecycle transition errors.

Transitions outside the table are never coerced to a nearby legal state;
the caller receives the exact from/to pair that was refused.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gavel.domain.exceptions import StateError

if TYPE_CHECKING:
    from gavel.domain.governance.roles import Role
    from gavel.domain.models.meeting import MeetingStatus


class InvalidMeetingTransitionError(StateError):
    """Raised when a transition is not present in the transition table.

    Attributes:
        from_status: Current status of the meeting.
        to_status: Attempted target status.
        allowed_transitions: Valid targets from the current status.
    """

    code = "invalid_transition"

    def __init__(
        self,
        from_status: MeetingStatus,
        to_status: MeetingStatus,
        allowed_transitions: list[MeetingStatus] | None = None,
    ) -> None:
        self.from_status = from_status
        self.to_status = to_status
        self.allowed_transitions = allowed_transitions or []

        allowed_str = (
            f" Valid transitions: {sorted(s.value for s in self.allowed_transitions)}"
            if self.allowed_transitions
            else ""
        )
        super().__init__(
            f"Invalid meeting transition: {from_status.value} -> {to_status.value}.{allowed_str}"
        )


class TransitionNotPermittedError(StateError):
    """Raised when the transition exists but the principal lacks the role."""

    code = "transition_forbidden"

    def __init__(
        self,
        from_status: MeetingStatus,
        to_status: MeetingStatus,
        required_role: Role,
        actual_role: Role,
    ) -> None:
        self.from_status = from_status
        self.to_status = to_status
        self.required_role = required_role
        self.actual_role = actual_role
        super().__init__(
            f"Transition {from_status.value} -> {to_status.value} requires role "
            f"{required_role.value}, principal has {actual_role.value}"
        )


class MeetingStatusChangedError(InvalidMeetingTransitionError):
    """Raised when another transition moved the meeting first.

    The checked from/to pair was legal, but the stored status no longer
    matched it at write time. The caller must reload and decide again.

    Attributes:
        current_status: Status found when the write was refused, if known.
    """

    def __init__(
        self,
        from_status: MeetingStatus,
        to_status: MeetingStatus,
        current_status: MeetingStatus | None = None,
    ) -> None:
        super().__init__(from_status, to_status)
        self.current_status = current_status
