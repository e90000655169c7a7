"""Vote token repository port.

Only token hashes cross this boundary. consume_if_valid is a single
atomic conditional update: of N concurrent callers on one hash, at most
one gets the token back.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable
from uuid import UUID

from gavel.domain.models.vote_token import TokenRejection, VoteToken


@runtime_checkable
class VoteTokenRepositoryProtocol(Protocol):
    """Persistence for vote tokens."""

    async def insert(self, token: VoteToken) -> None:
        """Store a freshly issued token."""
        ...

    async def find_by_hash(self, token_hash: str) -> VoteToken | None:
        """Fetch a token by hash, None if unknown."""
        ...

    async def consume(self, token_hash: str, tenant_id: UUID, used_at: datetime) -> bool:
        """Mark an unused token of the tenant as used.

        Returns:
            True if this call flipped the token to used.
        """
        ...

    async def consume_if_valid(self, token_hash: str, now: datetime) -> VoteToken | None:
        """Atomically mark the token used if unused and unexpired.

        Returns:
            The consumed token, or None if nothing was consumed.
        """
        ...

    async def diagnose_failure(self, token_hash: str, now: datetime) -> TokenRejection:
        """Explain why consume_if_valid returned None."""
        ...

    async def revoke_for_motion(
        self, tenant_id: UUID, motion_id: UUID, revoked_at: datetime
    ) -> int:
        """Mark every unused token of a motion as used.

        Returns:
            Number of tokens revoked.
        """
        ...
