"""Proxy delegation errors.

Invariants guarded:
- A member never delegates to themselves
- Both ends of a delegation belong to the tenant and the meeting
- The active delegation relation of a meeting has depth 1 (no chains)
- A receiver holds at most the configured number of active delegations
"""

from __future__ import annotations

from uuid import UUID

from gavel.domain.exceptions import StateError, ValidationError


class SelfDelegationError(ValidationError):
    """Raised when giver and receiver are the same member."""

    code = "self_delegation"

    def __init__(self, member_id: UUID) -> None:
        self.member_id = member_id
        super().__init__(f"Member {member_id} cannot delegate to themselves")


class InvalidMemberError(ValidationError):
    """Raised when a member does not belong to the tenant or meeting.

    Attributes:
        member_id: The rejected member.
        meeting_id: Meeting the delegation targets.
        role: "giver" or "receiver".
    """

    code = "invalid_member"

    def __init__(self, member_id: UUID, meeting_id: UUID, role: str) -> None:
        self.member_id = member_id
        self.meeting_id = meeting_id
        self.role = role
        super().__init__(
            f"Member {member_id} is not a valid {role} for meeting {meeting_id}"
        )


class ProxyChainForbiddenError(ValidationError):
    """Raised when a delegation would create a two-hop chain.

    Either the receiver already delegates to someone else, or the giver
    already holds delegations from others.
    """

    code = "chain_forbidden"

    def __init__(self, meeting_id: UUID, member_id: UUID, reason: str) -> None:
        self.meeting_id = meeting_id
        self.member_id = member_id
        self.reason = reason
        super().__init__(
            f"Proxy chain forbidden in meeting {meeting_id}: {reason}"
        )


class ProxyCapExceededError(ValidationError):
    """Raised when the receiver already holds the maximum number of proxies."""

    code = "cap_exceeded"

    def __init__(
        self,
        meeting_id: UUID,
        receiver_id: UUID,
        current_count: int,
        max_allowed: int,
    ) -> None:
        self.meeting_id = meeting_id
        self.receiver_id = receiver_id
        self.current_count = current_count
        self.max_allowed = max_allowed
        super().__init__(
            f"Proxy cap reached for receiver {receiver_id} "
            f"({current_count}/{max_allowed})"
        )


class ProxyNotActiveError(StateError):
    """Raised when a proxy vote is attempted without an active delegation."""

    code = "proxy_not_active"

    def __init__(self, meeting_id: UUID, giver_id: UUID, receiver_id: UUID) -> None:
        self.meeting_id = meeting_id
        self.giver_id = giver_id
        self.receiver_id = receiver_id
        super().__init__(
            f"No active proxy from {giver_id} to {receiver_id} "
            f"in meeting {meeting_id}"
        )
