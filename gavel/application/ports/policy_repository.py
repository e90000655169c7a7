"""Quorum and vote policy repository port."""

from __future__ import annotations

from typing import Protocol, runtime_checkable
from uuid import UUID

from gavel.domain.models.policy import QuorumPolicy, VotePolicy


@runtime_checkable
class PolicyRepositoryProtocol(Protocol):
    """Read access to tenant policies."""

    async def get_quorum_policy(
        self, tenant_id: UUID, policy_id: UUID
    ) -> QuorumPolicy | None:
        """Fetch a quorum policy, None if missing for this tenant."""
        ...

    async def get_vote_policy(
        self, tenant_id: UUID, policy_id: UUID
    ) -> VotePolicy | None:
        """Fetch a vote policy, None if missing for this tenant."""
        ...
