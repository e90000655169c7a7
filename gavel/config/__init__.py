"""Configuration for Gavel."""

from gavel.config.governance_config import (
    DEFAULT_GOVERNANCE_CONFIG,
    TEST_GOVERNANCE_CONFIG,
    GovernanceConfig,
)

__all__ = [
    "GovernanceConfig",
    "DEFAULT_GOVERNANCE_CONFIG",
    "TEST_GOVERNANCE_CONFIG",
]
