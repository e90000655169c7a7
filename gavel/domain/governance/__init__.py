"""Access-control tables: roles, hierarchy, permissions, transitions."""

from gavel.domain.governance.access_policy import (
    DEFAULT_ACCESS_POLICY,
    MEETING_TRANSITIONS,
    PERMISSIONS,
    AccessPolicy,
)
from gavel.domain.governance.roles import (
    MEETING_ROLES,
    ROLE_ALIASES,
    ROLE_LEVELS,
    Role,
    resolve_role,
)

__all__: list[str] = [
    "DEFAULT_ACCESS_POLICY",
    "MEETING_ROLES",
    "MEETING_TRANSITIONS",
    "PERMISSIONS",
    "ROLE_ALIASES",
    "ROLE_LEVELS",
    "AccessPolicy",
    "Role",
    "resolve_role",
]
