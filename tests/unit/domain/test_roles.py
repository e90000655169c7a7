"""Unit tests for role resolution and the Principal value object."""

import pytest
from uuid6 import uuid7

from gavel.domain.governance.roles import (
    MEETING_ROLES,
    ROLE_LEVELS,
    Role,
    resolve_role,
)
from gavel.domain.models.principal import Principal


class TestResolveRole:
    """Raw role strings map to canonical roles exactly once."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("admin", Role.ADMIN),
            ("  Operator ", Role.OPERATOR),
            ("PRESIDENT", Role.PRESIDENT),
            ("trust", Role.ASSESSOR),
            ("readonly", Role.VIEWER),
            ("ReadOnly", Role.VIEWER),
        ],
    )
    def test_known_roles_and_aliases(self, raw: str, expected: Role) -> None:
        """Case and surrounding whitespace are ignored; aliases resolve."""
        assert resolve_role(raw) is expected

    @pytest.mark.parametrize("raw", [None, "", "superuser", "root"])
    def test_unknown_defaults_to_anonymous(self, raw: str | None) -> None:
        """Missing or unknown roles carry zero permissions."""
        assert resolve_role(raw) is Role.ANONYMOUS

    def test_role_passes_through(self) -> None:
        """An already-resolved role is returned unchanged."""
        assert resolve_role(Role.AUDITOR) is Role.AUDITOR


class TestHierarchy:
    """Ascending order of system roles."""

    def test_system_roles_ascend(self) -> None:
        """anonymous < viewer < auditor < operator < president < admin."""
        ordered = [
            Role.ANONYMOUS,
            Role.VIEWER,
            Role.AUDITOR,
            Role.OPERATOR,
            Role.PRESIDENT,
            Role.ADMIN,
        ]
        levels = [ROLE_LEVELS[r] for r in ordered]
        assert levels == sorted(levels)
        assert len(set(levels)) == len(levels)

    def test_meeting_roles(self) -> None:
        """president, assessor and voter are granted per meeting."""
        assert MEETING_ROLES == {Role.PRESIDENT, Role.ASSESSOR, Role.VOTER}
        assert Role.VOTER.is_meeting_role
        assert not Role.OPERATOR.is_meeting_role


class TestPrincipal:
    """Principal construction from raw session data."""

    def test_from_session_resolves_all_roles(self) -> None:
        """System and meeting roles both go through alias resolution."""
        meeting_id = uuid7()
        principal = Principal.from_session(
            " TRUST ",
            user_id=uuid7(),
            meeting_roles={meeting_id: ["voter", "trust"]},
        )

        assert principal.role is Role.ASSESSOR
        assert principal.roles_in(meeting_id) == {Role.VOTER, Role.ASSESSOR}

    def test_roles_in_requires_user(self) -> None:
        """Anonymous principals never hold meeting roles."""
        meeting_id = uuid7()
        principal = Principal.from_session(
            "viewer", meeting_roles={meeting_id: ["president"]}
        )
        assert principal.roles_in(meeting_id) == frozenset()

    def test_roles_in_without_meeting(self) -> None:
        """No meeting context means no meeting roles."""
        principal = Principal.from_session("viewer", user_id=uuid7())
        assert principal.roles_in(None) == frozenset()

    def test_default_is_anonymous(self) -> None:
        """A bare Principal is anonymous."""
        assert Principal().role is Role.ANONYMOUS
