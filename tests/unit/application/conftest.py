"""Fixtures shared by the application service tests.

A live meeting of one tenant with an open motion, backed by the
in-memory stubs.
"""

from datetime import timedelta
from uuid import UUID

import pytest
from uuid6 import uuid7

from gavel.domain.models.meeting import Meeting, MeetingStatus
from gavel.domain.models.member import Member
from gavel.domain.models.motion import Motion
from gavel.infrastructure.stubs import (
    AttendanceRepositoryStub,
    BallotRepositoryStub,
    MeetingRepositoryStub,
    MemberDirectoryStub,
    MotionRepositoryStub,
    PolicyRepositoryStub,
    ProxyRepositoryStub,
    VoteTokenRepositoryStub,
)
from tests.helpers import FakeTimeAuthority


@pytest.fixture
def meetings() -> MeetingRepositoryStub:
    return MeetingRepositoryStub()


@pytest.fixture
def motions() -> MotionRepositoryStub:
    return MotionRepositoryStub()


@pytest.fixture
def policies() -> PolicyRepositoryStub:
    return PolicyRepositoryStub()


@pytest.fixture
def attendance() -> AttendanceRepositoryStub:
    return AttendanceRepositoryStub()


@pytest.fixture
def members() -> MemberDirectoryStub:
    return MemberDirectoryStub()


@pytest.fixture
def proxies() -> ProxyRepositoryStub:
    return ProxyRepositoryStub()


@pytest.fixture
def ballots(motions: MotionRepositoryStub) -> BallotRepositoryStub:
    return BallotRepositoryStub(motions)


@pytest.fixture
def tokens() -> VoteTokenRepositoryStub:
    return VoteTokenRepositoryStub()


@pytest.fixture
def live_meeting(meetings: MeetingRepositoryStub, tenant_id: UUID) -> Meeting:
    """A live first-convocation meeting."""
    return meetings.add(
        Meeting(id=uuid7(), tenant_id=tenant_id, status=MeetingStatus.LIVE, title="AG 2026")
    )


@pytest.fixture
def open_motion(
    motions: MotionRepositoryStub,
    live_meeting: Meeting,
    fake_time_authority: FakeTimeAuthority,
) -> Motion:
    """A motion opened ten minutes before the frozen clock."""
    return motions.add(
        Motion(
            id=uuid7(),
            meeting_id=live_meeting.id,
            tenant_id=live_meeting.tenant_id,
            title="Approbation des comptes",
            opened_at=fake_time_authority.now() - timedelta(minutes=10),
        )
    )


@pytest.fixture
def roster(members: MemberDirectoryStub, tenant_id: UUID) -> list[Member]:
    """Five active members of weight 1, 2, 3, 4 and 5."""
    return [
        members.add(
            Member(id=uuid7(), tenant_id=tenant_id, voting_power=float(power), full_name=f"M{power}")
        )
        for power in range(1, 6)
    ]
