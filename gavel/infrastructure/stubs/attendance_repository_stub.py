"""In-memory attendance roster and member directory."""

from __future__ import annotations

from collections import defaultdict
from uuid import UUID

from gavel.application.ports.attendance_repository import (
    AttendanceRepositoryProtocol,
    MemberDirectoryProtocol,
)
from gavel.domain.governance.roles import Role
from gavel.domain.models.attendance import AttendanceRecord
from gavel.domain.models.member import EligibleBase, Member


class AttendanceRepositoryStub(AttendanceRepositoryProtocol):
    """Attendance per (tenant, meeting); one record per member."""

    def __init__(self) -> None:
        self._records: dict[tuple[UUID, UUID], dict[UUID, AttendanceRecord]] = (
            defaultdict(dict)
        )

    def record(
        self, tenant_id: UUID, meeting_id: UUID, record: AttendanceRecord
    ) -> AttendanceRecord:
        self._records[(tenant_id, meeting_id)][record.member_id] = record
        return record

    async def list_for_meeting(
        self, tenant_id: UUID, meeting_id: UUID
    ) -> list[AttendanceRecord]:
        return list(self._records.get((tenant_id, meeting_id), {}).values())

    async def get_for_member(
        self, tenant_id: UUID, meeting_id: UUID, member_id: UUID
    ) -> AttendanceRecord | None:
        return self._records.get((tenant_id, meeting_id), {}).get(member_id)


class MemberDirectoryStub(MemberDirectoryProtocol):
    """Members of each tenant plus meeting role assignments.

    The eligible base of a meeting is the tenant's active members.
    """

    def __init__(self) -> None:
        self._members: dict[UUID, Member] = {}
        self._meeting_roles: dict[tuple[UUID, UUID], set[Role]] = defaultdict(set)

    def add(self, member: Member) -> Member:
        self._members[member.id] = member
        return member

    def assign_meeting_role(self, tenant_id: UUID, meeting_id: UUID, role: Role) -> None:
        self._meeting_roles[(tenant_id, meeting_id)].add(role)

    async def get_member(self, tenant_id: UUID, member_id: UUID) -> Member | None:
        member = self._members.get(member_id)
        if member is None or member.tenant_id != tenant_id:
            return None
        return member

    async def is_meeting_member(
        self, tenant_id: UUID, meeting_id: UUID, member_id: UUID
    ) -> bool:
        return await self.get_member(tenant_id, member_id) is not None

    async def eligible_base(self, tenant_id: UUID, meeting_id: UUID) -> EligibleBase:
        active = [
            m for m in self._members.values() if m.tenant_id == tenant_id and m.is_active
        ]
        return EligibleBase(
            members=len(active),
            weight=sum(max(0.0, m.voting_power) for m in active),
        )

    async def has_meeting_role(
        self, tenant_id: UUID, meeting_id: UUID, role: Role
    ) -> bool:
        return role in self._meeting_roles.get((tenant_id, meeting_id), set())
