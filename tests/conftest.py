"""
Pytest configuration and shared fixtures for Gavel tests.

Testing Standards:
- Async tests run under pytest-asyncio auto mode (pyproject.toml)
- Use AsyncMock for async collaborators, the in-memory stubs for state
- Time-dependent tests use FakeTimeAuthority
- Unit tests go in tests/unit/, concurrency and wiring tests in tests/integration/
"""

from uuid import UUID

import pytest
from uuid6 import uuid7

from gavel.config.governance_config import TEST_GOVERNANCE_CONFIG, GovernanceConfig
from tests.helpers import FakeTimeAuthority


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from gavel import __version__

    return __version__


@pytest.fixture
def fake_time_authority() -> FakeTimeAuthority:
    """Frozen clock at 2026-03-01T18:00:00Z."""
    return FakeTimeAuthority()


@pytest.fixture
def tenant_id() -> UUID:
    """A fresh tenant id."""
    return uuid7()


@pytest.fixture
def other_tenant_id() -> UUID:
    """A second tenant, for isolation checks."""
    return uuid7()


@pytest.fixture
def governance_config() -> GovernanceConfig:
    """Config with a receiver cap of 3 and a fixed token secret."""
    return TEST_GOVERNANCE_CONFIG
