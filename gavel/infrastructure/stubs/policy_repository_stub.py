"""In-memory policy repository."""

from __future__ import annotations

from uuid import UUID

from gavel.application.ports.policy_repository import PolicyRepositoryProtocol
from gavel.domain.models.policy import QuorumPolicy, VotePolicy


class PolicyRepositoryStub(PolicyRepositoryProtocol):
    """Policies stored per (tenant, policy id)."""

    def __init__(self) -> None:
        self._quorum: dict[tuple[UUID, UUID], QuorumPolicy] = {}
        self._vote: dict[tuple[UUID, UUID], VotePolicy] = {}

    def add_quorum_policy(self, tenant_id: UUID, policy: QuorumPolicy) -> QuorumPolicy:
        self._quorum[(tenant_id, policy.id)] = policy
        return policy

    def add_vote_policy(self, tenant_id: UUID, policy: VotePolicy) -> VotePolicy:
        self._vote[(tenant_id, policy.id)] = policy
        return policy

    async def get_quorum_policy(
        self, tenant_id: UUID, policy_id: UUID
    ) -> QuorumPolicy | None:
        return self._quorum.get((tenant_id, policy_id))

    async def get_vote_policy(
        self, tenant_id: UUID, policy_id: UUID
    ) -> VotePolicy | None:
        return self._vote.get((tenant_id, policy_id))
