"""Wiring of the governance services.

Policy, attendance and member data belong to the host application; the
in-memory stubs stand in for them until the host binds its own adapters.
When a session factory is supplied, meetings, motions, proxies, ballots
and vote tokens move to PostgreSQL together: ballot writes lock the motion
row that BallotService read, and meeting transitions swap the stored
status, so both must see the same database.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
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
from gavel.application.ports.policy_repository import PolicyRepositoryProtocol
from gavel.application.ports.proxy_repository import ProxyRepositoryProtocol
from gavel.application.ports.time_authority import TimeAuthorityProtocol
from gavel.application.ports.vote_token_repository import VoteTokenRepositoryProtocol
from gavel.application.services.ballot_service import BallotService
from gavel.application.services.meeting_lifecycle_service import (
    MeetingLifecycleService,
)
from gavel.application.services.meeting_workflow_service import (
    MeetingWorkflowService,
)
from gavel.application.services.motion_result_service import MotionResultService
from gavel.application.services.permission_checker import PermissionChecker
from gavel.application.services.proxy_graph_service import ProxyGraphService
from gavel.application.services.quorum_engine import QuorumEngine
from gavel.application.services.vote_engine import VoteEngine
from gavel.application.services.vote_token_service import VoteTokenService
from gavel.config.governance_config import GovernanceConfig
from gavel.infrastructure.adapters.persistence import (
    PostgresBallotRepository,
    PostgresMeetingRepository,
    PostgresMotionRepository,
    PostgresProxyRepository,
    PostgresVoteTokenRepository,
)
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
from gavel.infrastructure.time_authority import SystemTimeAuthority

logger = get_logger(__name__)


@dataclass(frozen=True)
class GovernanceRepositories:
    """Port implementations shared by the services."""

    meetings: MeetingRepositoryProtocol
    motions: MotionRepositoryProtocol
    policies: PolicyRepositoryProtocol
    attendance: AttendanceRepositoryProtocol
    members: MemberDirectoryProtocol
    proxies: ProxyRepositoryProtocol
    ballots: BallotRepositoryProtocol
    tokens: VoteTokenRepositoryProtocol


@dataclass(frozen=True)
class GovernanceServices:
    """Fully wired governance services."""

    repositories: GovernanceRepositories
    permissions: PermissionChecker
    quorum: QuorumEngine
    votes: VoteEngine
    results: MotionResultService
    lifecycle: MeetingLifecycleService
    workflow: MeetingWorkflowService
    proxies: ProxyGraphService
    ballots: BallotService
    tokens: VoteTokenService


def build_stub_repositories() -> GovernanceRepositories:
    """In-memory repositories for every port."""
    motions = MotionRepositoryStub()
    return GovernanceRepositories(
        meetings=MeetingRepositoryStub(),
        motions=motions,
        policies=PolicyRepositoryStub(),
        attendance=AttendanceRepositoryStub(),
        members=MemberDirectoryStub(),
        proxies=ProxyRepositoryStub(),
        ballots=BallotRepositoryStub(motions),
        tokens=VoteTokenRepositoryStub(),
    )


def build_repositories(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> GovernanceRepositories:
    """Repositories with the shared-state ports on PostgreSQL when a factory is given."""
    stubs = build_stub_repositories()
    if session_factory is None:
        return stubs
    return GovernanceRepositories(
        meetings=PostgresMeetingRepository(session_factory),
        motions=PostgresMotionRepository(session_factory),
        policies=stubs.policies,
        attendance=stubs.attendance,
        members=stubs.members,
        proxies=PostgresProxyRepository(session_factory),
        ballots=PostgresBallotRepository(session_factory),
        tokens=PostgresVoteTokenRepository(session_factory),
    )


def build_governance_services(
    config: GovernanceConfig,
    repositories: GovernanceRepositories | None = None,
    time_authority: TimeAuthorityProtocol | None = None,
) -> GovernanceServices:
    """Wire every service from a config and a set of repositories."""
    repos = repositories or build_stub_repositories()
    clock = time_authority or SystemTimeAuthority()

    permissions = PermissionChecker()
    quorum = QuorumEngine(weight_floor=config.weight_denominator_floor)
    votes = VoteEngine(quorum_engine=quorum)
    results = MotionResultService(
        meetings=repos.meetings,
        motions=repos.motions,
        policies=repos.policies,
        ballots=repos.ballots,
        attendance=repos.attendance,
        members=repos.members,
        vote_engine=votes,
        quorum_engine=quorum,
    )

    services = GovernanceServices(
        repositories=repos,
        permissions=permissions,
        quorum=quorum,
        votes=votes,
        results=results,
        lifecycle=MeetingLifecycleService(repos.meetings, permissions),
        workflow=MeetingWorkflowService(
            meetings=repos.meetings,
            motions=repos.motions,
            attendance=repos.attendance,
            members=repos.members,
            results=results,
            policy=permissions.policy,
        ),
        proxies=ProxyGraphService(
            proxies=repos.proxies,
            meetings=repos.meetings,
            members=repos.members,
            attendance=repos.attendance,
            time_authority=clock,
            max_per_receiver=config.proxy_max_per_receiver,
        ),
        ballots=BallotService(
            meetings=repos.meetings,
            motions=repos.motions,
            members=repos.members,
            attendance=repos.attendance,
            proxies=repos.proxies,
            ballots=repos.ballots,
            time_authority=clock,
        ),
        tokens=VoteTokenService(
            tokens=repos.tokens,
            meetings=repos.meetings,
            time_authority=clock,
            secret=config.vote_token_secret,
            default_ttl_seconds=config.vote_token_ttl_seconds,
        ),
    )

    logger.info(
        "governance_services_built",
        proxy_max_per_receiver=config.proxy_max_per_receiver,
        vote_token_ttl_seconds=config.vote_token_ttl_seconds,
        proxies_backend=type(repos.proxies).__name__,
    )
    return services


_services: GovernanceServices | None = None


def get_governance_services() -> GovernanceServices:
    """Get the process-wide services, configured from the environment."""
    global _services
    if _services is None:
        _services = build_governance_services(GovernanceConfig.from_environment())
    return _services


def set_governance_services(services: GovernanceServices) -> None:
    """Set custom services for testing."""
    global _services
    _services = services


def reset_governance_services() -> None:
    """Reset the singleton for testing."""
    global _services
    _services = None
