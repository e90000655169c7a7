"""Application ports (interfaces to external collaborators)."""

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
from gavel.application.ports.proxy_repository import (
    LockedProxySessionProtocol,
    ProxyRepositoryProtocol,
)
from gavel.application.ports.time_authority import TimeAuthorityProtocol
from gavel.application.ports.vote_token_repository import VoteTokenRepositoryProtocol

__all__: list[str] = [
    "AttendanceRepositoryProtocol",
    "BallotRepositoryProtocol",
    "LockedProxySessionProtocol",
    "MeetingRepositoryProtocol",
    "MemberDirectoryProtocol",
    "MotionRepositoryProtocol",
    "PolicyRepositoryProtocol",
    "ProxyRepositoryProtocol",
    "TimeAuthorityProtocol",
    "VoteTokenRepositoryProtocol",
]
