"""Domain errors for Gavel.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from GavelError and expose a ``code``.
"""

from gavel.domain.errors.ballot import (
    MeetingNotLiveError,
    MemberInactiveError,
    MemberNotPresentError,
    MotionNotOpenError,
)
from gavel.domain.errors.configuration import ConfigurationError
from gavel.domain.errors.not_found import (
    MeetingNotFoundError,
    MemberNotFoundError,
    MotionNotFoundError,
    PolicyNotFoundError,
)
from gavel.domain.errors.proxy import (
    InvalidMemberError,
    ProxyCapExceededError,
    ProxyChainForbiddenError,
    ProxyNotActiveError,
    SelfDelegationError,
)
from gavel.domain.errors.state_transition import (
    InvalidMeetingTransitionError,
    MeetingStatusChangedError,
    TransitionNotPermittedError,
)
from gavel.domain.errors.validation import (
    InvalidRequestError,
    InvalidThresholdError,
    InvalidVoteValueError,
)
from gavel.domain.errors.vote_token import (
    TokenAlreadyUsedError,
    TokenEmptyError,
    TokenExpiredError,
    TokenNotFoundError,
    VoteTokenRejectedError,
)

__all__: list[str] = [
    "ConfigurationError",
    "InvalidMeetingTransitionError",
    "InvalidMemberError",
    "InvalidRequestError",
    "InvalidThresholdError",
    "InvalidVoteValueError",
    "MeetingNotFoundError",
    "MeetingNotLiveError",
    "MeetingStatusChangedError",
    "MemberInactiveError",
    "MemberNotFoundError",
    "MemberNotPresentError",
    "MotionNotFoundError",
    "MotionNotOpenError",
    "PolicyNotFoundError",
    "ProxyCapExceededError",
    "ProxyChainForbiddenError",
    "ProxyNotActiveError",
    "SelfDelegationError",
    "TokenAlreadyUsedError",
    "TokenEmptyError",
    "TokenExpiredError",
    "TokenNotFoundError",
    "TransitionNotPermittedError",
    "VoteTokenRejectedError",
]
