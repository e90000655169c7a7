"""Quorum and vote policy models.

A quorum policy decides whether enough of the assembly took part; a vote
policy decides whether the "for" side carried the motion.

Invariants:
- Every threshold lies in [0, 1]
- A second-convocation threshold replaces the first only when set
- Double mode evaluates two independent (basis, threshold) pairs
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID

from gavel.domain.errors.validation import InvalidThresholdError
from gavel.domain.models.attendance import AttendanceMode


class QuorumBasis(Enum):
    """What the quorum ratio is measured against."""

    ELIGIBLE_MEMBERS = "eligible_members"
    ELIGIBLE_WEIGHT = "eligible_weight"


class QuorumMode(Enum):
    """Single or double quorum."""

    SINGLE = "single"
    DOUBLE = "double"


class VoteBase(Enum):
    """Denominator for the majority ratio."""

    EXPRESSED = "expressed"
    ELIGIBLE = "eligible"
    PRESENT = "present"


def _check_threshold(name: str, value: float | None) -> None:
    if value is None:
        return
    if not 0.0 <= value <= 1.0:
        raise InvalidThresholdError(name, value)


@dataclass(frozen=True, eq=True)
class QuorumPolicy:
    """Quorum policy configuration.

    Attributes:
        id: Policy identifier.
        name: Display name, embedded in the justification text.
        basis: Primary ratio basis.
        mode: single or double.
        threshold_1: Primary threshold (first convocation).
        threshold_2: Reduced primary threshold for the second convocation.
        count_remote: Whether remote attendance counts.
        include_proxies: Whether attendance by proxy counts.
        secondary_basis: Second basis for double mode.
        secondary_threshold: Second threshold for double mode.
    """

    id: UUID
    name: str
    basis: QuorumBasis = field(default=QuorumBasis.ELIGIBLE_MEMBERS)
    mode: QuorumMode = field(default=QuorumMode.SINGLE)
    threshold_1: float = field(default=0.5)
    threshold_2: float | None = field(default=None)
    count_remote: bool = field(default=True)
    include_proxies: bool = field(default=True)
    secondary_basis: QuorumBasis | None = field(default=None)
    secondary_threshold: float | None = field(default=None)

    def __post_init__(self) -> None:
        """Validate thresholds."""
        _check_threshold("threshold_1", self.threshold_1)
        _check_threshold("threshold_2", self.threshold_2)
        _check_threshold("secondary_threshold", self.secondary_threshold)

    def counted_modes(self) -> tuple[AttendanceMode, ...]:
        """Attendance modes that count toward the numerator, in display order."""
        modes = [AttendanceMode.PRESENT]
        if self.count_remote:
            modes.append(AttendanceMode.REMOTE)
        if self.include_proxies:
            modes.append(AttendanceMode.PROXY)
        return tuple(modes)

    def primary_threshold(self, convocation_no: int) -> float:
        """Threshold in force for the given convocation."""
        if convocation_no == 2 and self.threshold_2 is not None:
            return self.threshold_2
        return self.threshold_1

    @property
    def has_secondary(self) -> bool:
        """Check if both halves of the second condition are configured."""
        return self.secondary_basis is not None and self.secondary_threshold is not None


@dataclass(frozen=True, eq=True)
class VotePolicy:
    """Majority rule for a motion.

    Attributes:
        id: Policy identifier.
        name: Display name.
        base: Majority denominator.
        threshold: Required share of the base for "for".
        abstention_as_against: Report abstentions merged into "against".
    """

    id: UUID
    name: str
    base: VoteBase = field(default=VoteBase.EXPRESSED)
    threshold: float = field(default=0.5)
    abstention_as_against: bool = field(default=False)

    def __post_init__(self) -> None:
        """Validate threshold."""
        _check_threshold("threshold", self.threshold)
