"""Anonymous ballot-casting token.

Only the HMAC-SHA256 digest of the raw token is ever stored. A token is
bound to (tenant, meeting, member, motion) and is single-use: once used_at
is set it is permanently invalid.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID

TOKEN_HASH_LENGTH = 64


class TokenRejection(Enum):
    """Reason a presented token was refused."""

    EMPTY = "token_empty"
    NOT_FOUND = "token_not_found"
    ALREADY_USED = "token_already_used"
    EXPIRED = "token_expired"


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class VoteToken:
    """Persisted vote token record.

    Attributes:
        token_hash: 64 hex chars, HMAC-SHA256 of the raw token.
        tenant_id: Owning tenant.
        meeting_id: Meeting the token is valid for.
        member_id: Member the token was issued to.
        motion_id: Motion the token may vote on.
        expires_at: Expiry instant (UTC).
        used_at: Consumption instant, None while unused.
        created_at: Issue instant.
    """

    token_hash: str
    tenant_id: UUID
    meeting_id: UUID
    member_id: UUID
    motion_id: UUID
    expires_at: datetime
    used_at: datetime | None = field(default=None)
    created_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        """Validate token hash shape."""
        if len(self.token_hash) != TOKEN_HASH_LENGTH:
            raise ValueError(
                f"token_hash must be {TOKEN_HASH_LENGTH} hex chars, "
                f"got {len(self.token_hash)}"
            )

    @property
    def is_used(self) -> bool:
        """Check if the token was consumed or revoked."""
        return self.used_at is not None

    def is_expired(self, now: datetime) -> bool:
        """Check if the token expired strictly before ``now``."""
        return self.expires_at < now

    def rejection(self, now: datetime) -> TokenRejection | None:
        """Return why this token cannot be used at ``now``, or None if usable.

        A used token reports ALREADY_USED even when it has also expired.
        """
        if self.is_used:
            return TokenRejection.ALREADY_USED
        if self.is_expired(now):
            return TokenRejection.EXPIRED
        return None

    def consumed(self, at: datetime) -> VoteToken:
        """Return a used copy of this token."""
        return replace(self, used_at=at)
