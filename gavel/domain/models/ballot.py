"""Ballot domain model.

Invariant: at most one non-superseded ballot per (motion_id, voter_member_id).
Re-casting marks the previous ballot superseded; only current ballots are
tallied.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID


class BallotValue(Enum):
    """Position expressed by a ballot. NSP means "no position stated"."""

    FOR = "for"
    AGAINST = "against"
    ABSTAIN = "abstain"
    NSP = "nsp"

    @property
    def is_expressed(self) -> bool:
        """Check if this value counts toward the expressed base."""
        return self is not BallotValue.NSP


class BallotSource(Enum):
    """Channel the ballot arrived through."""

    ELECTRONIC = "electronic"
    MANUAL = "manual"
    DEGRADED = "degraded"


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class Ballot:
    """A ballot cast on a motion.

    For a proxy vote, voter_member_id is the giver (whose vote is counted)
    and proxy_holder_id is the receiver who physically cast it.

    Attributes:
        motion_id: The motion voted on.
        voter_member_id: Member whose vote is counted.
        value: for / against / abstain / nsp.
        weight: Voting weight (non-negative).
        is_proxy_vote: Cast by a proxy holder on behalf of voter_member_id.
        proxy_holder_id: Receiver casting a proxy vote.
        cast_at: When the ballot was cast.
        source: electronic, manual or degraded.
        superseded_at: Set when a later ballot from the same voter replaced it.
    """

    motion_id: UUID
    voter_member_id: UUID
    value: BallotValue
    weight: float = field(default=1.0)
    is_proxy_vote: bool = field(default=False)
    proxy_holder_id: UUID | None = field(default=None)
    cast_at: datetime = field(default_factory=_utc_now)
    source: BallotSource = field(default=BallotSource.ELECTRONIC)
    superseded_at: datetime | None = field(default=None)

    def __post_init__(self) -> None:
        """Validate ballot fields."""
        if self.weight < 0:
            raise ValueError(f"Ballot weight must be non-negative, got {self.weight}")
        if self.is_proxy_vote and self.proxy_holder_id is None:
            raise ValueError("A proxy vote requires proxy_holder_id")

    @property
    def is_current(self) -> bool:
        """Check if this ballot has not been superseded."""
        return self.superseded_at is None
