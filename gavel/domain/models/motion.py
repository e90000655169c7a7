"""Motion (resolution) domain model."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID


class DecisionStatus(Enum):
    """Outcome of a tallied motion, in evaluation priority order."""

    NO_VOTES = "no_votes"
    NO_QUORUM = "no_quorum"
    ADOPTED = "adopted"
    REJECTED = "rejected"
    NO_POLICY = "no_policy"


@dataclass(frozen=True, eq=True)
class Motion:
    """A motion put to the vote within a meeting.

    A motion is open iff opened_at is set and closed_at is not.

    Attributes:
        id: Motion identifier.
        meeting_id: Parent meeting.
        tenant_id: Owning tenant.
        title: Display title.
        vote_policy_id: Motion-level vote policy (falls back to the meeting's).
        quorum_policy_id: Motion-level quorum policy (falls back to the meeting's).
        secret: Secret ballot.
        opened_at: When voting opened.
        closed_at: When voting closed.
        decision_status: Recorded outcome once closed and tallied.
    """

    id: UUID
    meeting_id: UUID
    tenant_id: UUID
    title: str = field(default="")
    vote_policy_id: UUID | None = field(default=None)
    quorum_policy_id: UUID | None = field(default=None)
    secret: bool = field(default=False)
    opened_at: datetime | None = field(default=None)
    closed_at: datetime | None = field(default=None)
    decision_status: DecisionStatus | None = field(default=None)

    @property
    def is_open(self) -> bool:
        """Check if the motion currently accepts ballots."""
        return self.opened_at is not None and self.closed_at is None

    @property
    def is_closed(self) -> bool:
        """Check if voting on the motion has ended."""
        return self.closed_at is not None
