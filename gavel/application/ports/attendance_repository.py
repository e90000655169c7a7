"""Attendance and member directory ports."""

from __future__ import annotations

from typing import Protocol, runtime_checkable
from uuid import UUID

from gavel.domain.governance.roles import Role
from gavel.domain.models.attendance import AttendanceRecord
from gavel.domain.models.member import EligibleBase, Member


@runtime_checkable
class AttendanceRepositoryProtocol(Protocol):
    """Read access to the attendance roster of a meeting."""

    async def list_for_meeting(
        self, tenant_id: UUID, meeting_id: UUID
    ) -> list[AttendanceRecord]:
        """List every attendance record of a meeting."""
        ...

    async def get_for_member(
        self, tenant_id: UUID, meeting_id: UUID, member_id: UUID
    ) -> AttendanceRecord | None:
        """Fetch one member's attendance, None if never recorded."""
        ...


@runtime_checkable
class MemberDirectoryProtocol(Protocol):
    """Membership lookups and the eligible base of a meeting."""

    async def get_member(self, tenant_id: UUID, member_id: UUID) -> Member | None:
        """Fetch a member of the tenant, None if unknown."""
        ...

    async def is_meeting_member(
        self, tenant_id: UUID, meeting_id: UUID, member_id: UUID
    ) -> bool:
        """Check that the member and the meeting both belong to the tenant."""
        ...

    async def eligible_base(self, tenant_id: UUID, meeting_id: UUID) -> EligibleBase:
        """Count and total weight of the members eligible in a meeting."""
        ...

    async def has_meeting_role(
        self, tenant_id: UUID, meeting_id: UUID, role: Role
    ) -> bool:
        """Check whether anyone holds a meeting role (e.g. president)."""
        ...
