"""Domain models for Gavel."""

from gavel.domain.models.attendance import (
    DIRECT_PRESENCE_MODES,
    AttendanceMode,
    AttendanceRecord,
)
from gavel.domain.models.ballot import Ballot, BallotSource, BallotValue
from gavel.domain.models.meeting import Meeting, MeetingStatus
from gavel.domain.models.member import EligibleBase, Member, Participation
from gavel.domain.models.motion import DecisionStatus, Motion
from gavel.domain.models.policy import (
    QuorumBasis,
    QuorumMode,
    QuorumPolicy,
    VoteBase,
    VotePolicy,
)
from gavel.domain.models.principal import Principal
from gavel.domain.models.proxy import Proxy
from gavel.domain.models.vote_token import TokenRejection, VoteToken

__all__: list[str] = [
    "DIRECT_PRESENCE_MODES",
    "AttendanceMode",
    "AttendanceRecord",
    "Ballot",
    "BallotSource",
    "BallotValue",
    "DecisionStatus",
    "EligibleBase",
    "Meeting",
    "MeetingStatus",
    "Member",
    "Motion",
    "Participation",
    "Principal",
    "Proxy",
    "QuorumBasis",
    "QuorumMode",
    "QuorumPolicy",
    "TokenRejection",
    "VoteBase",
    "VotePolicy",
    "VoteToken",
]
