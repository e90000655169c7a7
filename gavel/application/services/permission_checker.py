"""Role-based permission checks over the injected access policy.

Rules, in order:
1. admin holds every permission and may perform every tabled transition.
2. A system role granted directly passes.
3. Hierarchy: a role at or above the level of any granted system role
   passes. Meeting roles are never reached through the hierarchy.
4. Meeting roles the principal holds for the given meeting pass.

Transitions use no hierarchy: exact system role, admin, or the required
role held in the meeting.
"""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from gavel.application.dtos.readiness import AvailableTransition
from gavel.domain.governance.access_policy import DEFAULT_ACCESS_POLICY, AccessPolicy
from gavel.domain.governance.roles import Role, resolve_role
from gavel.domain.models.meeting import MeetingStatus
from gavel.domain.models.principal import Principal


class PermissionChecker:
    """Answers "may this principal do X" from static tables.

    Pure lookups, no I/O: meeting roles travel on the Principal.
    """

    def __init__(self, policy: AccessPolicy = DEFAULT_ACCESS_POLICY) -> None:
        self._policy = policy

    @property
    def policy(self) -> AccessPolicy:
        return self._policy

    def check(
        self,
        principal: Principal,
        permission: str,
        meeting_id: UUID | None = None,
    ) -> bool:
        """Check whether the principal holds a permission.

        Unknown permissions are denied to everyone but admin.
        """
        if principal.role is Role.ADMIN:
            return True
        allowed = self._policy.roles_for(permission)
        if not allowed:
            return False
        return self._matches_any(principal, allowed, meeting_id)

    def has_role(
        self,
        principal: Principal,
        roles: Iterable[str | Role],
        meeting_id: UUID | None = None,
    ) -> bool:
        """Check whether the principal holds at least one of ``roles``."""
        if principal.role is Role.ADMIN:
            return True
        wanted = frozenset(resolve_role(r) for r in roles)
        return self._matches_any(principal, wanted, meeting_id)

    def can_transition(
        self,
        principal: Principal,
        from_status: MeetingStatus,
        to_status: MeetingStatus,
        meeting_id: UUID | None = None,
    ) -> bool:
        """Check whether the principal may move a meeting between two states."""
        required = self._policy.required_role(from_status, to_status)
        if required is None:
            return False
        if principal.role is Role.ADMIN or principal.role is required:
            return True
        return required in principal.roles_in(meeting_id)

    def available_transitions(
        self,
        principal: Principal,
        current_status: MeetingStatus,
        meeting_id: UUID | None = None,
    ) -> list[AvailableTransition]:
        """List the transitions from ``current_status`` open to the principal."""
        return [
            AvailableTransition(to_status=to_status, required_role=required)
            for to_status, required in self._policy.targets(current_status).items()
            if self.can_transition(principal, current_status, to_status, meeting_id)
        ]

    def get_permissions(
        self, principal: Principal, meeting_id: UUID | None = None
    ) -> list[str]:
        """Flattened permission set, in table order."""
        return [
            permission
            for permission in self._policy.permissions
            if self.check(principal, permission, meeting_id)
        ]

    def _matches_any(
        self,
        principal: Principal,
        allowed: frozenset[Role],
        meeting_id: UUID | None,
    ) -> bool:
        if principal.role in allowed:
            return True

        level = self._policy.level(principal.role)
        for role in allowed:
            if role in self._policy.meeting_roles:
                continue
            if level >= self._policy.level(role):
                return True

        return bool(principal.roles_in(meeting_id) & allowed)
