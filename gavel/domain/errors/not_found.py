"""Not-found errors (404-class, distinct from validation errors)."""

from __future__ import annotations

from uuid import UUID

from gavel.domain.exceptions import NotFoundError


class MeetingNotFoundError(NotFoundError):
    code = "meeting_not_found"

    def __init__(self, meeting_id: UUID, tenant_id: UUID) -> None:
        self.meeting_id = meeting_id
        self.tenant_id = tenant_id
        super().__init__(f"Meeting {meeting_id} not found for tenant {tenant_id}")


class MotionNotFoundError(NotFoundError):
    code = "motion_not_found"

    def __init__(self, motion_id: UUID, tenant_id: UUID) -> None:
        self.motion_id = motion_id
        self.tenant_id = tenant_id
        super().__init__(f"Motion {motion_id} not found for tenant {tenant_id}")


class PolicyNotFoundError(NotFoundError):
    code = "policy_not_found"

    def __init__(self, policy_id: UUID, kind: str) -> None:
        self.policy_id = policy_id
        self.kind = kind
        super().__init__(f"{kind} policy {policy_id} not found")


class MemberNotFoundError(NotFoundError):
    code = "member_not_found"

    def __init__(self, member_id: UUID, tenant_id: UUID) -> None:
        self.member_id = member_id
        self.tenant_id = tenant_id
        super().__init__(f"Member {member_id} not found for tenant {tenant_id}")
