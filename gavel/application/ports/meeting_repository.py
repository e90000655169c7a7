"""Meeting and motion repository ports.

Every lookup is tenant-scoped: a record stored under another tenant is
reported as missing, never returned.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable
from uuid import UUID

from gavel.domain.models.meeting import Meeting, MeetingStatus
from gavel.domain.models.motion import Motion


@runtime_checkable
class MeetingRepositoryProtocol(Protocol):
    """Persistence for meetings."""

    async def get(self, tenant_id: UUID, meeting_id: UUID) -> Meeting | None:
        """Fetch a meeting for a tenant.

        Returns:
            The meeting, or None if it does not exist for this tenant.
        """
        ...

    async def save_if_status(self, meeting: Meeting, expected: MeetingStatus) -> bool:
        """Persist a meeting only if its stored status is still ``expected``.

        Check and write are one atomic step, so two transitions from the
        same status cannot both land.

        Returns:
            True if written, False if the stored status had moved on (or
            the meeting no longer exists for its tenant).
        """
        ...


@runtime_checkable
class MotionRepositoryProtocol(Protocol):
    """Persistence for motions."""

    async def get(self, tenant_id: UUID, motion_id: UUID) -> Motion | None:
        """Fetch a motion for a tenant, None if missing."""
        ...

    async def list_for_meeting(self, tenant_id: UUID, meeting_id: UUID) -> list[Motion]:
        """List the motions of a meeting."""
        ...
