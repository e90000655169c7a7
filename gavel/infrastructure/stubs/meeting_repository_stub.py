"""In-memory meeting and motion repositories for development and tests."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from uuid import UUID

from gavel.application.ports.meeting_repository import (
    MeetingRepositoryProtocol,
    MotionRepositoryProtocol,
)
from gavel.domain.models.meeting import Meeting, MeetingStatus
from gavel.domain.models.motion import DecisionStatus, Motion


class MeetingRepositoryStub(MeetingRepositoryProtocol):
    """Meetings keyed by id; lookups filter on tenant."""

    def __init__(self) -> None:
        self._meetings: dict[UUID, Meeting] = {}

    def add(self, meeting: Meeting) -> Meeting:
        self._meetings[meeting.id] = meeting
        return meeting

    async def get(self, tenant_id: UUID, meeting_id: UUID) -> Meeting | None:
        meeting = self._meetings.get(meeting_id)
        if meeting is None or meeting.tenant_id != tenant_id:
            return None
        return meeting

    async def save_if_status(self, meeting: Meeting, expected: MeetingStatus) -> bool:
        # No await between the check and the write
        stored = self._meetings.get(meeting.id)
        if stored is None or stored.tenant_id != meeting.tenant_id:
            return False
        if stored.status is not expected:
            return False
        self._meetings[meeting.id] = meeting
        return True

    def clear(self) -> None:
        self._meetings.clear()


class MotionRepositoryStub(MotionRepositoryProtocol):
    """Motions keyed by id, with helpers to drive their voting window."""

    def __init__(self) -> None:
        self._motions: dict[UUID, Motion] = {}

    def add(self, motion: Motion) -> Motion:
        self._motions[motion.id] = motion
        return motion

    def peek(self, motion_id: UUID) -> Motion | None:
        """Unscoped read used by sibling stubs for compare-and-swap checks."""
        return self._motions.get(motion_id)

    def open(self, motion_id: UUID, at: datetime) -> Motion:
        motion = replace(self._motions[motion_id], opened_at=at, closed_at=None)
        self._motions[motion_id] = motion
        return motion

    def close(
        self,
        motion_id: UUID,
        at: datetime,
        decision_status: DecisionStatus | None = None,
    ) -> Motion:
        motion = replace(
            self._motions[motion_id], closed_at=at, decision_status=decision_status
        )
        self._motions[motion_id] = motion
        return motion

    async def get(self, tenant_id: UUID, motion_id: UUID) -> Motion | None:
        motion = self._motions.get(motion_id)
        if motion is None or motion.tenant_id != tenant_id:
            return None
        return motion

    async def list_for_meeting(self, tenant_id: UUID, meeting_id: UUID) -> list[Motion]:
        return [
            motion
            for motion in self._motions.values()
            if motion.tenant_id == tenant_id and motion.meeting_id == meeting_id
        ]

    def clear(self) -> None:
        self._motions.clear()
