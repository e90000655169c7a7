"""Data transfer objects returned by application services."""

from gavel.application.dtos.motion_result import (
    Decision,
    MajorityResult,
    MotionResult,
    Tally,
    TallyBucket,
)
from gavel.application.dtos.proxy_report import (
    CapViolation,
    ProxyChain,
    ProxyCycle,
    ProxyIntegrityReport,
    ProxyView,
)
from gavel.application.dtos.quorum import (
    EligibleSummary,
    LateRule,
    QuorumBlock,
    QuorumDetails,
    QuorumNumerator,
    QuorumResult,
)
from gavel.application.dtos.readiness import (
    AvailableTransition,
    ReadinessIssue,
    TransitionCheck,
    TransitionReadiness,
)
from gavel.application.dtos.vote_token import IssuedVoteToken, TokenValidation

__all__: list[str] = [
    "AvailableTransition",
    "CapViolation",
    "Decision",
    "EligibleSummary",
    "IssuedVoteToken",
    "LateRule",
    "MajorityResult",
    "MotionResult",
    "ProxyChain",
    "ProxyCycle",
    "ProxyIntegrityReport",
    "ProxyView",
    "QuorumBlock",
    "QuorumDetails",
    "QuorumNumerator",
    "QuorumResult",
    "ReadinessIssue",
    "Tally",
    "TallyBucket",
    "TokenValidation",
    "TransitionCheck",
    "TransitionReadiness",
]
