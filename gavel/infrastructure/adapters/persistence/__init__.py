"""PostgreSQL adapters for the meeting, motion, proxy, ballot and token ports."""

from gavel.infrastructure.adapters.persistence.ballot_repository import (
    PostgresBallotRepository,
)
from gavel.infrastructure.adapters.persistence.meeting_repository import (
    PostgresMeetingRepository,
    PostgresMotionRepository,
)
from gavel.infrastructure.adapters.persistence.proxy_repository import (
    PostgresProxyRepository,
)
from gavel.infrastructure.adapters.persistence.vote_token_repository import (
    PostgresVoteTokenRepository,
)

__all__: list[str] = [
    "PostgresBallotRepository",
    "PostgresMeetingRepository",
    "PostgresMotionRepository",
    "PostgresProxyRepository",
    "PostgresVoteTokenRepository",
]
