"""PostgreSQL vote token repository.

consume_if_valid is one conditional UPDATE ... RETURNING: the row lock
taken by the UPDATE makes concurrent consumers of one hash queue up, and
only the first still sees used_at IS NULL.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from gavel.application.ports.vote_token_repository import VoteTokenRepositoryProtocol
from gavel.domain.models.vote_token import TokenRejection, VoteToken

_TOKEN_COLUMNS = """
    token_hash, tenant_id, meeting_id, member_id, motion_id,
    expires_at, used_at, created_at
"""


def _row_to_token(row: Any) -> VoteToken:
    return VoteToken(
        token_hash=row["token_hash"],
        tenant_id=row["tenant_id"],
        meeting_id=row["meeting_id"],
        member_id=row["member_id"],
        motion_id=row["motion_id"],
        expires_at=row["expires_at"],
        used_at=row["used_at"],
        created_at=row["created_at"],
    )


class PostgresVoteTokenRepository(VoteTokenRepositoryProtocol):
    """Vote token persistence on PostgreSQL."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def insert(self, token: VoteToken) -> None:
        async with self._session_factory() as session, session.begin():
            await session.execute(
                text("""
                    INSERT INTO vote_tokens (
                        token_hash, tenant_id, meeting_id, member_id, motion_id,
                        expires_at, used_at, created_at
                    )
                    VALUES (
                        :token_hash, :tenant_id, :meeting_id, :member_id, :motion_id,
                        :expires_at, NULL, :created_at
                    )
                """),
                {
                    "token_hash": token.token_hash,
                    "tenant_id": token.tenant_id,
                    "meeting_id": token.meeting_id,
                    "member_id": token.member_id,
                    "motion_id": token.motion_id,
                    "expires_at": token.expires_at,
                    "created_at": token.created_at,
                },
            )

    async def find_by_hash(self, token_hash: str) -> VoteToken | None:
        async with self._session_factory() as session:
            result = await session.execute(
                text(f"SELECT {_TOKEN_COLUMNS} FROM vote_tokens WHERE token_hash = :h"),
                {"h": token_hash},
            )
            row = result.mappings().first()
            return _row_to_token(row) if row else None

    async def consume(self, token_hash: str, tenant_id: UUID, used_at: datetime) -> bool:
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                text("""
                    UPDATE vote_tokens
                    SET used_at = :used_at
                    WHERE token_hash = :h
                      AND tenant_id = :tenant_id
                      AND used_at IS NULL
                      AND expires_at >= :used_at
                """),
                {"h": token_hash, "tenant_id": tenant_id, "used_at": used_at},
            )
            return (result.rowcount or 0) > 0  # type: ignore[attr-defined]

    async def consume_if_valid(self, token_hash: str, now: datetime) -> VoteToken | None:
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                text(f"""
                    UPDATE vote_tokens
                    SET used_at = :now
                    WHERE token_hash = :h
                      AND used_at IS NULL
                      AND expires_at >= :now
                    RETURNING {_TOKEN_COLUMNS}
                """),
                {"h": token_hash, "now": now},
            )
            row = result.mappings().first()
            return _row_to_token(row) if row else None

    async def diagnose_failure(self, token_hash: str, now: datetime) -> TokenRejection:
        token = await self.find_by_hash(token_hash)
        if token is None:
            return TokenRejection.NOT_FOUND
        return token.rejection(now) or TokenRejection.ALREADY_USED

    async def revoke_for_motion(
        self, tenant_id: UUID, motion_id: UUID, revoked_at: datetime
    ) -> int:
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                text("""
                    UPDATE vote_tokens
                    SET used_at = :revoked_at
                    WHERE tenant_id = :tenant_id
                      AND motion_id = :motion_id
                      AND used_at IS NULL
                """),
                {
                    "tenant_id": tenant_id,
                    "motion_id": motion_id,
                    "revoked_at": revoked_at,
                },
            )
            return int(result.rowcount or 0)  # type: ignore[attr-defined]
