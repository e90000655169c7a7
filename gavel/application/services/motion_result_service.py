"""Loads a motion's voting context and hands it to the engines.

Policies resolve motion-level first, then meeting-level. Every read is
tenant-scoped; the snapshot is fetched here and the engines stay pure.
"""

from __future__ import annotations

from uuid import UUID

from structlog import get_logger

from gavel.application.dtos.motion_result import MotionResult
from gavel.application.dtos.quorum import QuorumResult
from gavel.application.ports.attendance_repository import (
    AttendanceRepositoryProtocol,
    MemberDirectoryProtocol,
)
from gavel.application.ports.ballot_repository import BallotRepositoryProtocol
from gavel.application.ports.meeting_repository import (
    MeetingRepositoryProtocol,
    MotionRepositoryProtocol,
)
from gavel.application.ports.policy_repository import PolicyRepositoryProtocol
from gavel.application.services.quorum_engine import QuorumEngine
from gavel.application.services.vote_engine import VoteEngine
from gavel.domain.errors import (
    MeetingNotFoundError,
    MotionNotFoundError,
    PolicyNotFoundError,
)
from gavel.domain.models.meeting import Meeting
from gavel.domain.models.motion import Motion
from gavel.domain.models.policy import QuorumPolicy, VotePolicy

logger = get_logger(__name__)


class MotionResultService:
    """Computes motion results and meeting quorum from repositories."""

    def __init__(
        self,
        meetings: MeetingRepositoryProtocol,
        motions: MotionRepositoryProtocol,
        policies: PolicyRepositoryProtocol,
        ballots: BallotRepositoryProtocol,
        attendance: AttendanceRepositoryProtocol,
        members: MemberDirectoryProtocol,
        vote_engine: VoteEngine,
        quorum_engine: QuorumEngine,
    ) -> None:
        self._meetings = meetings
        self._motions = motions
        self._policies = policies
        self._ballots = ballots
        self._attendance = attendance
        self._members = members
        self._vote_engine = vote_engine
        self._quorum_engine = quorum_engine

    async def compute_motion_result(
        self, tenant_id: UUID, motion_id: UUID
    ) -> MotionResult:
        """Compute the result of a motion.

        Raises:
            MotionNotFoundError: Motion unknown for the tenant.
            MeetingNotFoundError: Parent meeting unknown for the tenant.
            PolicyNotFoundError: A referenced policy does not exist.
        """
        motion = await self._motions.get(tenant_id, motion_id)
        if motion is None:
            raise MotionNotFoundError(motion_id, tenant_id)
        meeting = await self._load_meeting(tenant_id, motion.meeting_id)

        quorum_policy = await self._quorum_policy(tenant_id, meeting, motion)
        vote_policy = await self._vote_policy(tenant_id, meeting, motion)
        ballots = await self._ballots.list_for_motion(tenant_id, motion_id)
        attendance = await self._attendance.list_for_meeting(tenant_id, meeting.id)
        eligible = await self._members.eligible_base(tenant_id, meeting.id)

        result = self._vote_engine.compute_motion_result(
            motion,
            ballots,
            eligible,
            vote_policy,
            quorum_policy,
            convocation_no=meeting.convocation_no,
            attendance=attendance,
        )
        logger.info(
            "motion_result_computed",
            tenant_id=str(tenant_id),
            meeting_id=str(meeting.id),
            motion_id=str(motion_id),
            decision=result.decision.status.value,
            quorum_met=result.quorum.met,
        )
        return result

    async def compute_meeting_quorum(
        self, tenant_id: UUID, meeting_id: UUID
    ) -> QuorumResult:
        """Quorum of the meeting as a whole, under the meeting-level policy."""
        meeting = await self._load_meeting(tenant_id, meeting_id)
        policy = await self._quorum_policy(tenant_id, meeting, None)
        attendance = await self._attendance.list_for_meeting(tenant_id, meeting_id)
        eligible = await self._members.eligible_base(tenant_id, meeting_id)
        return self._quorum_engine.compute_for_meeting(
            meeting, policy, attendance, eligible=eligible
        )

    async def _load_meeting(self, tenant_id: UUID, meeting_id: UUID) -> Meeting:
        meeting = await self._meetings.get(tenant_id, meeting_id)
        if meeting is None:
            raise MeetingNotFoundError(meeting_id, tenant_id)
        return meeting

    async def _quorum_policy(
        self, tenant_id: UUID, meeting: Meeting, motion: Motion | None
    ) -> QuorumPolicy | None:
        policy_id = (motion.quorum_policy_id if motion else None) or meeting.quorum_policy_id
        if policy_id is None:
            return None
        policy = await self._policies.get_quorum_policy(tenant_id, policy_id)
        if policy is None:
            raise PolicyNotFoundError(policy_id, "quorum")
        return policy

    async def _vote_policy(
        self, tenant_id: UUID, meeting: Meeting, motion: Motion
    ) -> VotePolicy | None:
        policy_id = motion.vote_policy_id or meeting.vote_policy_id
        if policy_id is None:
            return None
        policy = await self._policies.get_vote_policy(tenant_id, policy_id)
        if policy is None:
            raise PolicyNotFoundError(policy_id, "vote")
        return policy
