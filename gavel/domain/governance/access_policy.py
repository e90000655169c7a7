"""Single source of truth for permissions, lifecycle transitions and labels.

The tables are immutable and built once; services receive an
``AccessPolicy`` instance instead of reaching for module globals, and
both the permission check and the lifecycle check read the same
transition table.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from gavel.domain.governance.roles import MEETING_ROLES, ROLE_LEVELS, Role
from gavel.domain.models.meeting import MeetingStatus

_A = Role.ADMIN
_O = Role.OPERATOR
_AU = Role.AUDITOR
_V = Role.VIEWER
_P = Role.PRESIDENT
_AS = Role.ASSESSOR
_VO = Role.VOTER

_READERS = (_A, _O, _AU, _V, _P, _AS)

PERMISSIONS: Mapping[str, frozenset[Role]] = MappingProxyType(
    {
        # Meetings
        "meeting:create": frozenset({_A, _O}),
        "meeting:read": frozenset({*_READERS, _VO}),
        "meeting:update": frozenset({_A, _O}),
        "meeting:delete": frozenset({_A}),
        "meeting:freeze": frozenset({_A, _P}),
        "meeting:unfreeze": frozenset({_A}),
        "meeting:open": frozenset({_A, _P}),
        "meeting:close": frozenset({_A, _P}),
        "meeting:validate": frozenset({_A, _P}),
        "meeting:archive": frozenset({_A, _O}),
        "meeting:assign_roles": frozenset({_A, _O}),
        # Motions
        "motion:create": frozenset({_A, _O}),
        "motion:read": frozenset({*_READERS, _VO}),
        "motion:update": frozenset({_A, _O}),
        "motion:delete": frozenset({_A, _O}),
        "motion:open": frozenset({_A, _O}),
        "motion:close": frozenset({_A, _O, _P}),
        # Votes
        "vote:cast": frozenset({_A, _O, _VO}),
        "vote:read": frozenset({_A, _O, _AU, _P, _AS}),
        "vote:manual": frozenset({_A, _O}),
        # Members
        "member:create": frozenset({_A, _O}),
        "member:read": frozenset(_READERS),
        "member:update": frozenset({_A, _O}),
        "member:delete": frozenset({_A}),
        "member:import": frozenset({_A, _O}),
        # Attendance
        "attendance:create": frozenset({_A, _O}),
        "attendance:read": frozenset(_READERS),
        "attendance:update": frozenset({_A, _O}),
        # Proxies
        "proxy:create": frozenset({_A, _O}),
        "proxy:read": frozenset(_READERS),
        "proxy:delete": frozenset({_A, _O}),
        # Speech
        "speech:request": frozenset({_A, _O, _P, _VO}),
        "speech:grant": frozenset({_A, _O, _P}),
        "speech:end": frozenset({_A, _O, _P}),
        # Audit
        "audit:read": frozenset({_A, _AU, _P, _AS}),
        "audit:export": frozenset({_A, _AU, _P}),
        # Administration
        "admin:users": frozenset({_A}),
        "admin:policies": frozenset({_A}),
        "admin:system": frozenset({_A}),
        "admin:roles": frozenset({_A}),
        # Reports
        "report:generate": frozenset({_A, _O, _P}),
        "report:read": frozenset(_READERS),
        "report:export": frozenset({_A, _O, _AU, _P}),
    }
)

_S = MeetingStatus

# from -> {to: required role}; archived has no entry and is therefore terminal
MEETING_TRANSITIONS: Mapping[MeetingStatus, Mapping[MeetingStatus, Role]] = (
    MappingProxyType(
        {
            _S.DRAFT: MappingProxyType({_S.SCHEDULED: _O, _S.FROZEN: _P}),
            _S.SCHEDULED: MappingProxyType({_S.FROZEN: _P, _S.DRAFT: _A}),
            _S.FROZEN: MappingProxyType({_S.LIVE: _P, _S.SCHEDULED: _A}),
            _S.LIVE: MappingProxyType({_S.PAUSED: _O, _S.CLOSED: _P}),
            _S.PAUSED: MappingProxyType({_S.LIVE: _O, _S.CLOSED: _P}),
            _S.CLOSED: MappingProxyType({_S.VALIDATED: _P}),
            _S.VALIDATED: MappingProxyType({_S.ARCHIVED: _A}),
        }
    )
)

ROLE_LABELS: Mapping[Role, str] = MappingProxyType(
    {
        Role.ADMIN: "Administrateur",
        Role.OPERATOR: "Operateur",
        Role.AUDITOR: "Auditeur",
        Role.VIEWER: "Observateur",
        Role.PRESIDENT: "President de seance",
        Role.ASSESSOR: "Assesseur / Scrutateur",
        Role.VOTER: "Electeur",
    }
)

STATUS_LABELS: Mapping[MeetingStatus, str] = MappingProxyType(
    {
        _S.DRAFT: "Brouillon",
        _S.SCHEDULED: "Planifiee",
        _S.FROZEN: "Verrouillee",
        _S.LIVE: "En cours",
        _S.PAUSED: "En pause",
        _S.CLOSED: "Cloturee",
        _S.VALIDATED: "Validee",
        _S.ARCHIVED: "Archivee",
    }
)


@dataclass(frozen=True)
class AccessPolicy:
    """Immutable bundle of the access-control tables.

    Attributes:
        permissions: permission name -> roles granted it.
        transitions: from status -> {to status: required role}.
        role_levels: hierarchy level per role.
        meeting_roles: roles granted per meeting (never reached by hierarchy).
        role_labels: display label per role.
        status_labels: display label per meeting status.
    """

    permissions: Mapping[str, frozenset[Role]] = field(default_factory=lambda: PERMISSIONS)
    transitions: Mapping[MeetingStatus, Mapping[MeetingStatus, Role]] = field(
        default_factory=lambda: MEETING_TRANSITIONS
    )
    role_levels: Mapping[Role, int] = field(default_factory=lambda: ROLE_LEVELS)
    meeting_roles: frozenset[Role] = MEETING_ROLES
    role_labels: Mapping[Role, str] = field(default_factory=lambda: ROLE_LABELS)
    status_labels: Mapping[MeetingStatus, str] = field(default_factory=lambda: STATUS_LABELS)

    def level(self, role: Role) -> int:
        """Hierarchy level of a role (0 when unranked)."""
        return self.role_levels.get(role, 0)

    def targets(self, from_status: MeetingStatus) -> Mapping[MeetingStatus, Role]:
        """Allowed targets from a status with the role each requires."""
        return self.transitions.get(from_status, MappingProxyType({}))

    def required_role(
        self, from_status: MeetingStatus, to_status: MeetingStatus
    ) -> Role | None:
        """Role required for a transition, or None if it is not in the table."""
        return self.targets(from_status).get(to_status)

    def roles_for(self, permission: str) -> frozenset[Role]:
        """Roles directly granted a permission (empty for unknown names)."""
        return self.permissions.get(permission, frozenset())


DEFAULT_ACCESS_POLICY = AccessPolicy()
