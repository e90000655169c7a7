"""Attendance records used for quorum computation."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID


class AttendanceMode(Enum):
    """How a member takes part in the meeting."""

    PRESENT = "present"
    REMOTE = "remote"
    PROXY = "proxy"
    EXCUSED = "excused"
    ABSENT = "absent"


# Modes that count as physically taking part (a proxy holder must be one of these)
DIRECT_PRESENCE_MODES: frozenset[AttendanceMode] = frozenset(
    {AttendanceMode.PRESENT, AttendanceMode.REMOTE}
)


@dataclass(frozen=True, eq=True)
class AttendanceRecord:
    """One member's attendance for a meeting.

    Attributes:
        member_id: The member.
        mode: Participation mode.
        voting_power: Weight of the member (non-negative).
        present_from_at: When the member arrived (late-arrival rule).
        checked_out_at: When the member left; checked-out members never count.
    """

    member_id: UUID
    mode: AttendanceMode
    voting_power: float = field(default=1.0)
    present_from_at: datetime | None = field(default=None)
    checked_out_at: datetime | None = field(default=None)

    def __post_init__(self) -> None:
        """Validate attendance fields."""
        if self.voting_power < 0:
            raise ValueError(
                f"voting_power must be non-negative, got {self.voting_power}"
            )

    @property
    def is_present_direct(self) -> bool:
        """Check if the member is present or remote and not checked out."""
        return self.checked_out_at is None and self.mode in DIRECT_PRESENCE_MODES

    def is_counted(
        self,
        modes: Iterable[AttendanceMode],
        late_cutoff: datetime | None = None,
    ) -> bool:
        """Check if this record counts toward a participation numerator.

        Args:
            modes: Attendance modes allowed by the quorum policy.
            late_cutoff: Motion opening time; arrivals after it are excluded.

        Returns:
            True if the record is counted.
        """
        if self.checked_out_at is not None:
            return False
        if self.mode not in frozenset(modes):
            return False
        if late_cutoff is not None and self.present_from_at is not None:
            return self.present_from_at <= late_cutoff
        return True
