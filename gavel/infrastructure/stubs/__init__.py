"""In-memory implementations of every port, for development and tests."""

from gavel.infrastructure.stubs.attendance_repository_stub import (
    AttendanceRepositoryStub,
    MemberDirectoryStub,
)
from gavel.infrastructure.stubs.ballot_repository_stub import BallotRepositoryStub
from gavel.infrastructure.stubs.meeting_repository_stub import (
    MeetingRepositoryStub,
    MotionRepositoryStub,
)
from gavel.infrastructure.stubs.policy_repository_stub import PolicyRepositoryStub
from gavel.infrastructure.stubs.proxy_repository_stub import ProxyRepositoryStub
from gavel.infrastructure.stubs.vote_token_repository_stub import (
    VoteTokenRepositoryStub,
)

__all__: list[str] = [
    "AttendanceRepositoryStub",
    "BallotRepositoryStub",
    "MeetingRepositoryStub",
    "MemberDirectoryStub",
    "MotionRepositoryStub",
    "PolicyRepositoryStub",
    "ProxyRepositoryStub",
    "VoteTokenRepositoryStub",
]
