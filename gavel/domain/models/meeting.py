"""Meeting domain model and lifecycle states.

State Machine (single table in gavel.domain.governance.access_policy):
    draft -> scheduled -> frozen -> live <-> paused -> closed -> validated -> archived
    scheduled -> draft and frozen -> scheduled are admin-only reverts.

archived is terminal: no outgoing transitions for any role.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from uuid import UUID


class MeetingStatus(Enum):
    """Lifecycle status of a general assembly meeting."""

    DRAFT = "draft"
    SCHEDULED = "scheduled"
    FROZEN = "frozen"
    LIVE = "live"
    PAUSED = "paused"
    CLOSED = "closed"
    VALIDATED = "validated"
    ARCHIVED = "archived"

    def is_terminal(self) -> bool:
        """Check if no transition may leave this status."""
        return self is MeetingStatus.ARCHIVED


VALID_CONVOCATIONS: frozenset[int] = frozenset({1, 2})


@dataclass(frozen=True, eq=True)
class Meeting:
    """A meeting (general assembly session) scoped to one tenant.

    Status only changes through MeetingLifecycleService.transition, which
    checks the transition table and the principal's role before calling
    with_status.

    Attributes:
        id: Meeting identifier.
        tenant_id: Owning tenant.
        status: Current lifecycle status.
        convocation_no: 1 for the first calling, 2 for the second.
        title: Display title.
        quorum_policy_id: Meeting-level quorum policy (motion-level wins).
        vote_policy_id: Meeting-level vote policy (motion-level wins).
        validated_at: Set once results are validated; voting is then forbidden.
    """

    id: UUID
    tenant_id: UUID
    status: MeetingStatus = field(default=MeetingStatus.DRAFT)
    convocation_no: int = field(default=1)
    title: str = field(default="")
    quorum_policy_id: UUID | None = field(default=None)
    vote_policy_id: UUID | None = field(default=None)
    validated_at: datetime | None = field(default=None)

    def __post_init__(self) -> None:
        """Validate meeting fields."""
        if self.convocation_no not in VALID_CONVOCATIONS:
            raise ValueError(
                f"convocation_no must be 1 or 2, got {self.convocation_no}"
            )

    def with_status(self, new_status: MeetingStatus) -> Meeting:
        """Return a copy of this meeting in a new status.

        No table check happens here; callers go through the lifecycle service.
        """
        return replace(self, status=new_status)
