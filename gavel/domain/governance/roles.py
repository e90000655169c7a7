"""Canonical roles and the alias normalization step.

System roles (admin, operator, auditor, viewer) come from the session;
meeting roles (president, assessor, voter) are granted per meeting.
Raw role strings are resolved exactly once, at the boundary, by
``resolve_role``.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping


class Role(Enum):
    """Canonical role identifiers."""

    ANONYMOUS = "anonymous"
    PUBLIC = "public"
    VIEWER = "viewer"
    VOTER = "voter"
    AUDITOR = "auditor"
    ASSESSOR = "assessor"
    OPERATOR = "operator"
    PRESIDENT = "president"
    ADMIN = "admin"

    @property
    def is_meeting_role(self) -> bool:
        """Check if this role is granted per meeting rather than per session."""
        return self in MEETING_ROLES


MEETING_ROLES: frozenset[Role] = frozenset(
    {Role.PRESIDENT, Role.ASSESSOR, Role.VOTER}
)

ROLE_LEVELS: Mapping[Role, int] = MappingProxyType(
    {
        Role.ANONYMOUS: 0,
        Role.PUBLIC: 3,
        Role.VIEWER: 5,
        Role.VOTER: 10,
        Role.AUDITOR: 50,
        Role.ASSESSOR: 60,
        Role.OPERATOR: 70,
        Role.PRESIDENT: 80,
        Role.ADMIN: 100,
    }
)

ROLE_ALIASES: Mapping[str, Role] = MappingProxyType(
    {
        "trust": Role.ASSESSOR,
        "readonly": Role.VIEWER,
    }
)


def resolve_role(raw: str | Role | None) -> Role:
    """Map a raw role string to its canonical role.

    Whitespace and case are ignored, aliases are applied, and anything
    unknown (or missing) resolves to ANONYMOUS.

    Args:
        raw: Role as found in the session, or an already-resolved Role.

    Returns:
        The canonical Role.
    """
    if isinstance(raw, Role):
        return raw
    if raw is None:
        return Role.ANONYMOUS
    key = raw.strip().lower()
    if key in ROLE_ALIASES:
        return ROLE_ALIASES[key]
    try:
        return Role(key)
    except ValueError:
        return Role.ANONYMOUS
