"""Governance engine configuration.

Environment Variables:
- PROXY_MAX_PER_RECEIVER: Active proxies one receiver may hold
  (default: 99, min: 1, max: 10000)
- VOTE_TOKEN_TTL_SECONDS: Vote token lifetime (default: 3600, min: 60, max: 86400)
- VOTE_TOKEN_SECRET: HMAC key for vote token hashes (required)
- QUORUM_WEIGHT_FLOOR: Denominator used when eligible weight is zero
  (default: 0.0001, must be positive)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from gavel.domain.errors import ConfigurationError


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable, falling back to default when unparsable."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


DEFAULT_PROXY_MAX_PER_RECEIVER = 99
MIN_PROXY_MAX_PER_RECEIVER = 1
MAX_PROXY_MAX_PER_RECEIVER = 10_000

DEFAULT_VOTE_TOKEN_TTL_SECONDS = 3600
MIN_VOTE_TOKEN_TTL_SECONDS = 60
MAX_VOTE_TOKEN_TTL_SECONDS = 86_400

DEFAULT_WEIGHT_DENOMINATOR_FLOOR = 0.0001


@dataclass(frozen=True)
class GovernanceConfig:
    """Tunables of the governance engine.

    Attributes:
        proxy_max_per_receiver: Cap on active proxies held by one receiver.
        vote_token_ttl_seconds: Default vote token lifetime.
        vote_token_secret: HMAC-SHA256 key for token hashes.
        weight_denominator_floor: Quorum denominator when eligible weight is 0.
    """

    proxy_max_per_receiver: int = DEFAULT_PROXY_MAX_PER_RECEIVER
    vote_token_ttl_seconds: int = DEFAULT_VOTE_TOKEN_TTL_SECONDS
    vote_token_secret: str = field(default="", repr=False)
    weight_denominator_floor: float = DEFAULT_WEIGHT_DENOMINATOR_FLOOR

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if (
            not MIN_PROXY_MAX_PER_RECEIVER
            <= self.proxy_max_per_receiver
            <= MAX_PROXY_MAX_PER_RECEIVER
        ):
            raise ValueError(
                f"proxy_max_per_receiver must be between {MIN_PROXY_MAX_PER_RECEIVER} "
                f"and {MAX_PROXY_MAX_PER_RECEIVER}, got {self.proxy_max_per_receiver}"
            )
        if (
            not MIN_VOTE_TOKEN_TTL_SECONDS
            <= self.vote_token_ttl_seconds
            <= MAX_VOTE_TOKEN_TTL_SECONDS
        ):
            raise ValueError(
                f"vote_token_ttl_seconds must be between {MIN_VOTE_TOKEN_TTL_SECONDS} "
                f"and {MAX_VOTE_TOKEN_TTL_SECONDS}, got {self.vote_token_ttl_seconds}"
            )
        if self.weight_denominator_floor <= 0:
            raise ValueError(
                "weight_denominator_floor must be positive, "
                f"got {self.weight_denominator_floor}"
            )

    @classmethod
    def from_environment(cls) -> GovernanceConfig:
        """Build config from environment variables, clamping numbers to range.

        Raises:
            ConfigurationError: VOTE_TOKEN_SECRET is missing or empty.
        """
        secret = os.environ.get("VOTE_TOKEN_SECRET", "")
        if not secret:
            raise ConfigurationError("VOTE_TOKEN_SECRET", "must be set and non-empty")

        cap = _get_int_env("PROXY_MAX_PER_RECEIVER", DEFAULT_PROXY_MAX_PER_RECEIVER)
        cap = max(MIN_PROXY_MAX_PER_RECEIVER, min(cap, MAX_PROXY_MAX_PER_RECEIVER))

        ttl = _get_int_env("VOTE_TOKEN_TTL_SECONDS", DEFAULT_VOTE_TOKEN_TTL_SECONDS)
        ttl = max(MIN_VOTE_TOKEN_TTL_SECONDS, min(ttl, MAX_VOTE_TOKEN_TTL_SECONDS))

        floor = _get_float_env("QUORUM_WEIGHT_FLOOR", DEFAULT_WEIGHT_DENOMINATOR_FLOOR)
        if floor <= 0:
            floor = DEFAULT_WEIGHT_DENOMINATOR_FLOOR

        return cls(
            proxy_max_per_receiver=cap,
            vote_token_ttl_seconds=ttl,
            vote_token_secret=secret,
            weight_denominator_floor=floor,
        )


# Production defaults; the secret still has to come from the environment
DEFAULT_GOVERNANCE_CONFIG = GovernanceConfig()

# Unit tests: small cap so cap_exceeded is reachable, fixed secret
TEST_GOVERNANCE_CONFIG = GovernanceConfig(
    proxy_max_per_receiver=3,
    vote_token_ttl_seconds=MIN_VOTE_TOKEN_TTL_SECONDS,
    vote_token_secret="test-secret",
)
