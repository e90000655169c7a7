"""Pre-transition readiness checks.

Issues block a transition, warnings do not. These checks sit on top of
the role check done by MeetingLifecycleService; they look at the
meeting's content (motions, attendance, results), not at who asks.
"""

from __future__ import annotations

from uuid import UUID

from structlog import get_logger

from gavel.application.dtos.readiness import (
    ReadinessIssue,
    TransitionCheck,
    TransitionReadiness,
)
from gavel.application.ports.attendance_repository import (
    AttendanceRepositoryProtocol,
    MemberDirectoryProtocol,
)
from gavel.application.ports.meeting_repository import (
    MeetingRepositoryProtocol,
    MotionRepositoryProtocol,
)
from gavel.application.services.motion_result_service import MotionResultService
from gavel.domain.errors import MeetingNotFoundError
from gavel.domain.governance.access_policy import DEFAULT_ACCESS_POLICY, AccessPolicy
from gavel.domain.governance.roles import Role
from gavel.domain.models.meeting import Meeting, MeetingStatus

logger = get_logger(__name__)

_S = MeetingStatus


class MeetingWorkflowService:
    """Evaluates whether a meeting is ready for its next status."""

    def __init__(
        self,
        meetings: MeetingRepositoryProtocol,
        motions: MotionRepositoryProtocol,
        attendance: AttendanceRepositoryProtocol,
        members: MemberDirectoryProtocol,
        results: MotionResultService,
        policy: AccessPolicy = DEFAULT_ACCESS_POLICY,
    ) -> None:
        self._meetings = meetings
        self._motions = motions
        self._attendance = attendance
        self._members = members
        self._results = results
        self._policy = policy

    async def issues_before_transition(
        self,
        tenant_id: UUID,
        meeting_id: UUID,
        to_status: MeetingStatus,
        from_status: MeetingStatus | None = None,
    ) -> TransitionCheck:
        """Check one transition.

        Args:
            tenant_id: Caller's tenant.
            meeting_id: Meeting to check.
            to_status: Target status.
            from_status: Overrides the meeting's current status.

        Raises:
            MeetingNotFoundError: Meeting unknown for the tenant.
        """
        meeting = await self._load(tenant_id, meeting_id)
        return await self._check(meeting, from_status or meeting.status, to_status)

    async def get_transition_readiness(
        self, tenant_id: UUID, meeting_id: UUID
    ) -> TransitionReadiness:
        """Check every outgoing transition of the meeting's current status."""
        meeting = await self._load(tenant_id, meeting_id)
        checks = [
            await self._check(meeting, meeting.status, to_status)
            for to_status in self._policy.targets(meeting.status)
        ]
        return TransitionReadiness(
            meeting_id=meeting.id,
            current_status=meeting.status,
            transitions=tuple(checks),
        )

    async def _load(self, tenant_id: UUID, meeting_id: UUID) -> Meeting:
        meeting = await self._meetings.get(tenant_id, meeting_id)
        if meeting is None:
            raise MeetingNotFoundError(meeting_id, tenant_id)
        return meeting

    async def _check(
        self,
        meeting: Meeting,
        from_status: MeetingStatus,
        to_status: MeetingStatus,
    ) -> TransitionCheck:
        tenant_id = meeting.tenant_id
        issues: list[ReadinessIssue] = []
        warnings: list[ReadinessIssue] = []

        if from_status is _S.DRAFT and to_status is _S.SCHEDULED:
            motions = await self._motions.list_for_meeting(tenant_id, meeting.id)
            if not motions:
                issues.append(ReadinessIssue(code="no_motions"))

        elif from_status is _S.SCHEDULED and to_status is _S.FROZEN:
            attendance = await self._attendance.list_for_meeting(tenant_id, meeting.id)
            if not any(record.is_present_direct for record in attendance):
                issues.append(ReadinessIssue(code="no_attendance"))
            if not await self._members.has_meeting_role(
                tenant_id, meeting.id, Role.PRESIDENT
            ):
                warnings.append(ReadinessIssue(code="no_president"))

        elif from_status is _S.FROZEN and to_status is _S.LIVE:
            quorum = await self._results.compute_meeting_quorum(tenant_id, meeting.id)
            if quorum.met is False:
                warnings.append(ReadinessIssue(code="quorum_not_met"))

        elif (from_status is _S.LIVE and to_status is _S.PAUSED) or (
            from_status in (_S.LIVE, _S.PAUSED) and to_status is _S.CLOSED
        ):
            motions = await self._motions.list_for_meeting(tenant_id, meeting.id)
            open_count = sum(1 for motion in motions if motion.is_open)
            if open_count:
                issues.append(ReadinessIssue(code="motion_open", count=open_count))

        elif from_status is _S.CLOSED and to_status is _S.VALIDATED:
            motions = await self._motions.list_for_meeting(tenant_id, meeting.id)
            bad = sum(
                1
                for motion in motions
                if motion.is_closed and motion.decision_status is None
            )
            if bad:
                issues.append(ReadinessIssue(code="bad_results", count=bad))

        if from_status.is_terminal():
            issues.append(ReadinessIssue(code="archived_immutable"))

        check = TransitionCheck(
            from_status=from_status,
            to_status=to_status,
            issues=tuple(issues),
            warnings=tuple(warnings),
        )
        if not check.can_proceed:
            logger.debug(
                "meeting_transition_not_ready",
                tenant_id=str(tenant_id),
                meeting_id=str(meeting.id),
                from_status=from_status.value,
                to_status=to_status.value,
                issues=[issue.code for issue in issues],
            )
        return check
