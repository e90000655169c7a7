"""Ballot casting errors."""

from __future__ import annotations

from uuid import UUID

from gavel.domain.exceptions import StateError


class MotionNotOpenError(StateError):
    """Raised when a ballot targets a motion that is not open for voting.

    Also raised when the motion closed between validation and the write.
    """

    code = "motion_not_open"

    def __init__(self, motion_id: UUID) -> None:
        self.motion_id = motion_id
        super().__init__(f"Motion {motion_id} is not open for voting")


class MeetingNotLiveError(StateError):
    """Raised when the meeting is not in the live status (or already validated)."""

    code = "meeting_not_live"

    def __init__(self, meeting_id: UUID, status: str) -> None:
        self.meeting_id = meeting_id
        self.status = status
        super().__init__(f"Meeting {meeting_id} is {status}, voting is not possible")


class MemberNotPresentError(StateError):
    """Raised when the voting member is not checked in as present or remote."""

    code = "member_not_present"

    def __init__(self, meeting_id: UUID, member_id: UUID) -> None:
        self.meeting_id = meeting_id
        self.member_id = member_id
        super().__init__(
            f"Member {member_id} is not recorded as present in meeting {meeting_id}"
        )


class MemberInactiveError(StateError):
    """Raised when an inactive member (or proxy holder) attempts to vote."""

    code = "member_inactive"

    def __init__(self, member_id: UUID) -> None:
        self.member_id = member_id
        super().__init__(f"Member {member_id} is inactive")
