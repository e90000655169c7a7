"""In-memory vote token repository.

consume_if_valid checks and flips used_at without awaiting in between,
which makes it atomic under asyncio.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from gavel.application.ports.vote_token_repository import VoteTokenRepositoryProtocol
from gavel.domain.models.vote_token import TokenRejection, VoteToken


class VoteTokenRepositoryStub(VoteTokenRepositoryProtocol):
    """Tokens keyed by hash."""

    def __init__(self) -> None:
        self._tokens: dict[str, VoteToken] = {}

    async def insert(self, token: VoteToken) -> None:
        self._tokens[token.token_hash] = token

    async def find_by_hash(self, token_hash: str) -> VoteToken | None:
        return self._tokens.get(token_hash)

    async def consume(self, token_hash: str, tenant_id: UUID, used_at: datetime) -> bool:
        token = self._tokens.get(token_hash)
        if token is None or token.tenant_id != tenant_id or token.is_used:
            return False
        if token.is_expired(used_at):
            return False
        self._tokens[token_hash] = token.consumed(used_at)
        return True

    async def consume_if_valid(self, token_hash: str, now: datetime) -> VoteToken | None:
        token = self._tokens.get(token_hash)
        if token is None or token.rejection(now) is not None:
            return None
        consumed = token.consumed(now)
        self._tokens[token_hash] = consumed
        return consumed

    async def diagnose_failure(self, token_hash: str, now: datetime) -> TokenRejection:
        token = self._tokens.get(token_hash)
        if token is None:
            return TokenRejection.NOT_FOUND
        return token.rejection(now) or TokenRejection.ALREADY_USED

    async def revoke_for_motion(
        self, tenant_id: UUID, motion_id: UUID, revoked_at: datetime
    ) -> int:
        revoked = 0
        for token_hash, token in list(self._tokens.items()):
            if (
                token.tenant_id == tenant_id
                and token.motion_id == motion_id
                and not token.is_used
            ):
                self._tokens[token_hash] = token.consumed(revoked_at)
                revoked += 1
        return revoked
