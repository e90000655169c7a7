"""Ballot casting.

Direct vote: the member must be checked in as present or remote.
Proxy vote: the holder must be present or remote themselves (attendance
by proxy does not qualify) and hold an active delegation from the member
whose vote is counted.

The write is conditional on the motion still being open, so a ballot
racing a close fails with motion_not_open rather than landing late.
"""

from __future__ import annotations

from uuid import UUID

from structlog import get_logger

from gavel.application.ports.attendance_repository import (
    AttendanceRepositoryProtocol,
    MemberDirectoryProtocol,
)
from gavel.application.ports.ballot_repository import BallotRepositoryProtocol
from gavel.application.ports.meeting_repository import (
    MeetingRepositoryProtocol,
    MotionRepositoryProtocol,
)
from gavel.application.ports.proxy_repository import ProxyRepositoryProtocol
from gavel.application.ports.time_authority import TimeAuthorityProtocol
from gavel.domain.errors import (
    InvalidRequestError,
    InvalidVoteValueError,
    MeetingNotFoundError,
    MeetingNotLiveError,
    MemberInactiveError,
    MemberNotFoundError,
    MemberNotPresentError,
    MotionNotFoundError,
    MotionNotOpenError,
    ProxyNotActiveError,
)
from gavel.domain.models.ballot import Ballot, BallotSource, BallotValue
from gavel.domain.models.meeting import MeetingStatus
from gavel.domain.models.member import Member

logger = get_logger(__name__)


class BallotService:
    """Validates and records ballots."""

    def __init__(
        self,
        meetings: MeetingRepositoryProtocol,
        motions: MotionRepositoryProtocol,
        members: MemberDirectoryProtocol,
        attendance: AttendanceRepositoryProtocol,
        proxies: ProxyRepositoryProtocol,
        ballots: BallotRepositoryProtocol,
        time_authority: TimeAuthorityProtocol,
    ) -> None:
        self._meetings = meetings
        self._motions = motions
        self._members = members
        self._attendance = attendance
        self._proxies = proxies
        self._ballots = ballots
        self._time = time_authority

    async def cast_ballot(
        self,
        tenant_id: UUID,
        motion_id: UUID | None,
        member_id: UUID | None,
        value: str,
        *,
        proxy_holder_id: UUID | None = None,
        source: BallotSource = BallotSource.ELECTRONIC,
    ) -> Ballot:
        """Record a ballot, superseding the member's previous one.

        Args:
            tenant_id: Caller's tenant.
            motion_id: Motion voted on.
            member_id: Member whose vote is counted (the giver for a proxy vote).
            value: "for", "against", "abstain" or "nsp".
            proxy_holder_id: Set for a proxy vote: the receiver casting it.
            source: Channel the ballot arrived through.

        Returns:
            The stored ballot.
        """
        if motion_id is None:
            raise InvalidRequestError("motion_id")
        if member_id is None:
            raise InvalidRequestError("member_id")
        try:
            ballot_value = BallotValue(value.strip().lower())
        except ValueError:
            raise InvalidVoteValueError(value) from None

        log = logger.bind(
            tenant_id=str(tenant_id),
            motion_id=str(motion_id),
            member_id=str(member_id),
            is_proxy_vote=proxy_holder_id is not None,
        )

        motion = await self._motions.get(tenant_id, motion_id)
        if motion is None:
            raise MotionNotFoundError(motion_id, tenant_id)
        meeting = await self._meetings.get(tenant_id, motion.meeting_id)
        if meeting is None:
            raise MeetingNotFoundError(motion.meeting_id, tenant_id)

        if meeting.status is not MeetingStatus.LIVE:
            raise MeetingNotLiveError(meeting.id, meeting.status.value)
        if meeting.validated_at is not None:
            raise MeetingNotLiveError(meeting.id, MeetingStatus.VALIDATED.value)
        if not motion.is_open:
            raise MotionNotOpenError(motion_id)

        member = await self._active_member(tenant_id, member_id)

        if proxy_holder_id is not None:
            await self._active_member(tenant_id, proxy_holder_id)
            await self._require_present(tenant_id, meeting.id, proxy_holder_id)
            if not await self._proxies.has_active_proxy(
                tenant_id, meeting.id, member_id, proxy_holder_id
            ):
                raise ProxyNotActiveError(meeting.id, member_id, proxy_holder_id)
        else:
            await self._require_present(tenant_id, meeting.id, member_id)

        ballot = Ballot(
            motion_id=motion_id,
            voter_member_id=member_id,
            value=ballot_value,
            weight=max(0.0, member.voting_power),
            is_proxy_vote=proxy_holder_id is not None,
            proxy_holder_id=proxy_holder_id,
            cast_at=self._time.now(),
            source=source,
        )

        if not await self._ballots.save_if_motion_open(tenant_id, ballot):
            log.info("ballot_rejected", code=MotionNotOpenError.code)
            raise MotionNotOpenError(motion_id)

        log.info("ballot_cast", value=ballot_value.value, weight=ballot.weight)
        return ballot

    async def _active_member(self, tenant_id: UUID, member_id: UUID) -> Member:
        member = await self._members.get_member(tenant_id, member_id)
        if member is None:
            raise MemberNotFoundError(member_id, tenant_id)
        if not member.is_active:
            raise MemberInactiveError(member_id)
        return member

    async def _require_present(
        self, tenant_id: UUID, meeting_id: UUID, member_id: UUID
    ) -> None:
        record = await self._attendance.get_for_member(tenant_id, meeting_id, member_id)
        if record is None or not record.is_present_direct:
            raise MemberNotPresentError(meeting_id, member_id)
