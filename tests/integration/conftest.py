"""Fixtures for integration tests: fully wired services over the stubs."""

from uuid import UUID

import pytest
from uuid6 import uuid7

from gavel.bootstrap.governance import (
    GovernanceServices,
    build_governance_services,
    build_stub_repositories,
)
from gavel.config.governance_config import GovernanceConfig
from gavel.domain.models.meeting import Meeting, MeetingStatus
from gavel.domain.models.member import Member
from tests.helpers import FakeTimeAuthority


@pytest.fixture
def services(
    governance_config: GovernanceConfig,
    fake_time_authority: FakeTimeAuthority,
) -> GovernanceServices:
    return build_governance_services(
        governance_config,
        build_stub_repositories(),
        time_authority=fake_time_authority,
    )


@pytest.fixture
def meeting(services: GovernanceServices, tenant_id: UUID) -> Meeting:
    """A live meeting with no policies."""
    return services.repositories.meetings.add(
        Meeting(id=uuid7(), tenant_id=tenant_id, status=MeetingStatus.LIVE)
    )


@pytest.fixture
def add_members(services: GovernanceServices, tenant_id: UUID):
    """Factory adding ``n`` active members of weight 1."""

    def _add(n: int) -> list[Member]:
        return [
            services.repositories.members.add(Member(id=uuid7(), tenant_id=tenant_id))
            for _ in range(n)
        ]

    return _add
