"""Unit tests for governance service wiring."""

import os
from collections.abc import Iterator
from datetime import timedelta
from unittest.mock import MagicMock, patch
from uuid import UUID

import pytest
from uuid6 import uuid7

from gavel.bootstrap.governance import (
    build_governance_services,
    build_repositories,
    build_stub_repositories,
    get_governance_services,
    reset_governance_services,
    set_governance_services,
)
from gavel.config.governance_config import GovernanceConfig
from gavel.domain.errors import ConfigurationError
from gavel.domain.models.meeting import Meeting
from gavel.infrastructure.adapters.persistence import (
    PostgresBallotRepository,
    PostgresMeetingRepository,
    PostgresMotionRepository,
    PostgresProxyRepository,
    PostgresVoteTokenRepository,
)
from gavel.infrastructure.stubs import (
    AttendanceRepositoryStub,
    BallotRepositoryStub,
    ProxyRepositoryStub,
)
from tests.helpers import FakeTimeAuthority


@pytest.fixture(autouse=True)
def _reset_singleton() -> Iterator[None]:
    reset_governance_services()
    yield
    reset_governance_services()


class TestBuildRepositories:
    def test_stubs_without_session_factory(self) -> None:
        repos = build_repositories()
        assert isinstance(repos.proxies, ProxyRepositoryStub)
        assert isinstance(repos.ballots, BallotRepositoryStub)

    def test_shared_state_ports_move_to_postgres_together(self) -> None:
        """Meetings and motions follow ballots to PostgreSQL; host ports stay stubbed."""
        repos = build_repositories(MagicMock())

        assert isinstance(repos.meetings, PostgresMeetingRepository)
        assert isinstance(repos.motions, PostgresMotionRepository)
        assert isinstance(repos.proxies, PostgresProxyRepository)
        assert isinstance(repos.ballots, PostgresBallotRepository)
        assert isinstance(repos.tokens, PostgresVoteTokenRepository)
        assert isinstance(repos.attendance, AttendanceRepositoryStub)


class TestBuildGovernanceServices:
    def test_services_share_repositories(self, governance_config: GovernanceConfig) -> None:
        repos = build_stub_repositories()
        services = build_governance_services(governance_config, repos)

        assert services.repositories is repos
        assert services.permissions.policy is not None

    async def test_clock_and_ttl_reach_token_service(
        self,
        governance_config: GovernanceConfig,
        fake_time_authority: FakeTimeAuthority,
        tenant_id: UUID,
    ) -> None:
        """Tokens expire after the configured TTL on the injected clock."""
        services = build_governance_services(
            governance_config, time_authority=fake_time_authority
        )
        meeting = services.repositories.meetings.add(Meeting(id=uuid7(), tenant_id=tenant_id))

        issued = await services.tokens.generate(tenant_id, meeting.id, uuid7(), uuid7())

        assert issued.expires_at == fake_time_authority.now() + timedelta(
            seconds=governance_config.vote_token_ttl_seconds
        )
        assert issued.token_hash == services.tokens.hash_token(issued.token)

    def test_secret_keys_the_hash(self, governance_config: GovernanceConfig) -> None:
        """Two configs with different secrets hash the same token differently."""
        other = GovernanceConfig(vote_token_secret="another-secret")
        first = build_governance_services(governance_config)
        second = build_governance_services(other)
        assert first.tokens.hash_token("abc") != second.tokens.hash_token("abc")


class TestSingleton:
    def test_reads_environment_once(self) -> None:
        with patch.dict(os.environ, {"VOTE_TOKEN_SECRET": "k"}, clear=True):
            first = get_governance_services()
            second = get_governance_services()
        assert first is second

    def test_requires_secret(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ConfigurationError):
                get_governance_services()

    def test_set_overrides(self, governance_config: GovernanceConfig) -> None:
        services = build_governance_services(governance_config)
        set_governance_services(services)
        assert get_governance_services() is services
