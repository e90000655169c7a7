"""Application services: engines and governance workflows."""

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

__all__: list[str] = [
    "BallotService",
    "MeetingLifecycleService",
    "MeetingWorkflowService",
    "MotionResultService",
    "PermissionChecker",
    "ProxyGraphService",
    "QuorumEngine",
    "VoteEngine",
    "VoteTokenService",
]
