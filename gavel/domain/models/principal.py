"""Authenticated principal as seen by the permission checker."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from uuid import UUID

from gavel.domain.governance.roles import Role, resolve_role


@dataclass(frozen=True)
class Principal:
    """The caller: a normalized system role plus per-meeting roles.

    Attributes:
        role: Canonical system role (aliases already resolved).
        user_id: Authenticated user, None for anonymous callers.
        tenant_id: Tenant of the session.
        meeting_roles: meeting id -> roles granted in that meeting.
    """

    role: Role = field(default=Role.ANONYMOUS)
    user_id: UUID | None = field(default=None)
    tenant_id: UUID | None = field(default=None)
    meeting_roles: Mapping[UUID, frozenset[Role]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def from_session(
        cls,
        raw_role: str | None,
        user_id: UUID | None = None,
        tenant_id: UUID | None = None,
        meeting_roles: Mapping[UUID, Iterable[str | Role]] | None = None,
    ) -> Principal:
        """Build a principal from raw session values, resolving aliases once."""
        resolved = {
            meeting_id: frozenset(resolve_role(r) for r in roles)
            for meeting_id, roles in (meeting_roles or {}).items()
        }
        return cls(
            role=resolve_role(raw_role),
            user_id=user_id,
            tenant_id=tenant_id,
            meeting_roles=MappingProxyType(resolved),
        )

    def roles_in(self, meeting_id: UUID | None) -> frozenset[Role]:
        """Meeting roles held in a meeting (none without a meeting or user)."""
        if meeting_id is None or self.user_id is None:
            return frozenset()
        return self.meeting_roles.get(meeting_id, frozenset())
