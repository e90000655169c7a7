"""Proxy (delegation) domain model.

Invariants (per meeting):
- giver_member_id != receiver_member_id
- at most one active proxy per giver
- no member is simultaneously an active giver and an active receiver
- each receiver holds at most the configured number of active proxies

Only the first invariant is local to a single record and checked here;
the others are enforced by ProxyGraphService under a lock.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from uuid import UUID


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class Proxy:
    """A delegation of voting rights from giver to receiver for one meeting."""

    id: UUID
    tenant_id: UUID
    meeting_id: UUID
    giver_member_id: UUID
    receiver_member_id: UUID
    active: bool = field(default=True)
    created_at: datetime = field(default_factory=_utc_now)
    revoked_at: datetime | None = field(default=None)

    def __post_init__(self) -> None:
        """Validate proxy fields."""
        if self.giver_member_id == self.receiver_member_id:
            raise ValueError("A proxy cannot delegate to its own giver")

    def revoked(self, at: datetime) -> Proxy:
        """Return an inactive copy of this proxy."""
        return replace(self, active=False, revoked_at=at)
