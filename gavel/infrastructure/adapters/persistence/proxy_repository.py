"""PostgreSQL proxy repository.

Table ``proxies`` holds one row per (tenant_id, meeting_id,
giver_member_id); a row is active while revoked_at is NULL.

lock_scope opens a transaction and takes a transaction-scoped advisory
lock per member, in sorted order. Two upserts sharing a member serialize;
the locks release on commit or rollback.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from gavel.application.ports.proxy_repository import (
    LockedProxySessionProtocol,
    ProxyRepositoryProtocol,
)
from gavel.domain.models.proxy import Proxy

logger = get_logger(__name__)

_PROXY_COLUMNS = """
    id, tenant_id, meeting_id, giver_member_id, receiver_member_id,
    created_at, revoked_at
"""


def _row_to_proxy(row: Any) -> Proxy:
    return Proxy(
        id=row["id"],
        tenant_id=row["tenant_id"],
        meeting_id=row["meeting_id"],
        giver_member_id=row["giver_member_id"],
        receiver_member_id=row["receiver_member_id"],
        active=row["revoked_at"] is None,
        created_at=row["created_at"],
        revoked_at=row["revoked_at"],
    )


class _PostgresLockedProxySession(LockedProxySessionProtocol):
    def __init__(self, session: AsyncSession, tenant_id: UUID, meeting_id: UUID) -> None:
        self._session = session
        self._tenant_id = tenant_id
        self._meeting_id = meeting_id

    async def count_active_as_giver(self, member_id: UUID) -> int:
        result = await self._session.execute(
            text("""
                SELECT COUNT(*)
                FROM proxies
                WHERE tenant_id = :tenant_id
                  AND meeting_id = :meeting_id
                  AND giver_member_id = :member_id
                  AND revoked_at IS NULL
            """),
            {
                "tenant_id": self._tenant_id,
                "meeting_id": self._meeting_id,
                "member_id": member_id,
            },
        )
        return int(result.scalar() or 0)

    async def count_active_as_receiver(
        self, member_id: UUID, exclude_giver_id: UUID | None = None
    ) -> int:
        result = await self._session.execute(
            text("""
                SELECT COUNT(*)
                FROM proxies
                WHERE tenant_id = :tenant_id
                  AND meeting_id = :meeting_id
                  AND receiver_member_id = :member_id
                  AND revoked_at IS NULL
                  AND (CAST(:exclude_giver_id AS uuid) IS NULL
                       OR giver_member_id <> :exclude_giver_id)
            """),
            {
                "tenant_id": self._tenant_id,
                "meeting_id": self._meeting_id,
                "member_id": member_id,
                "exclude_giver_id": exclude_giver_id,
            },
        )
        return int(result.scalar() or 0)

    async def upsert(self, proxy: Proxy) -> Proxy:
        result = await self._session.execute(
            text(f"""
                INSERT INTO proxies (
                    id, tenant_id, meeting_id, giver_member_id,
                    receiver_member_id, created_at, revoked_at
                )
                VALUES (
                    :id, :tenant_id, :meeting_id, :giver_member_id,
                    :receiver_member_id, :created_at, NULL
                )
                ON CONFLICT (tenant_id, meeting_id, giver_member_id)
                DO UPDATE SET
                    receiver_member_id = EXCLUDED.receiver_member_id,
                    created_at = EXCLUDED.created_at,
                    revoked_at = NULL
                RETURNING {_PROXY_COLUMNS}
            """),
            {
                "id": proxy.id,
                "tenant_id": proxy.tenant_id,
                "meeting_id": proxy.meeting_id,
                "giver_member_id": proxy.giver_member_id,
                "receiver_member_id": proxy.receiver_member_id,
                "created_at": proxy.created_at,
            },
        )
        return _row_to_proxy(result.mappings().one())


class PostgresProxyRepository(ProxyRepositoryProtocol):
    """Proxy persistence on PostgreSQL via SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def lock_scope(
        self, tenant_id: UUID, meeting_id: UUID, member_ids: Sequence[UUID]
    ) -> AsyncIterator[LockedProxySessionProtocol]:
        async with self._session_factory() as session, session.begin():
            for member_id in sorted(set(member_ids), key=str):
                await session.execute(
                    text("SELECT pg_advisory_xact_lock(hashtextextended(:key, 0))"),
                    {"key": f"proxy:{tenant_id}:{meeting_id}:{member_id}"},
                )
            yield _PostgresLockedProxySession(session, tenant_id, meeting_id)

    async def revoke_for_giver(
        self, tenant_id: UUID, meeting_id: UUID, giver_id: UUID, revoked_at: datetime
    ) -> bool:
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                text("""
                    UPDATE proxies
                    SET revoked_at = :revoked_at
                    WHERE tenant_id = :tenant_id
                      AND meeting_id = :meeting_id
                      AND giver_member_id = :giver_id
                      AND revoked_at IS NULL
                """),
                {
                    "tenant_id": tenant_id,
                    "meeting_id": meeting_id,
                    "giver_id": giver_id,
                    "revoked_at": revoked_at,
                },
            )
            return (result.rowcount or 0) > 0  # type: ignore[attr-defined]

    async def has_active_proxy(
        self, tenant_id: UUID, meeting_id: UUID, giver_id: UUID, receiver_id: UUID
    ) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                text("""
                    SELECT 1
                    FROM proxies
                    WHERE tenant_id = :tenant_id
                      AND meeting_id = :meeting_id
                      AND giver_member_id = :giver_id
                      AND receiver_member_id = :receiver_id
                      AND revoked_at IS NULL
                    LIMIT 1
                """),
                {
                    "tenant_id": tenant_id,
                    "meeting_id": meeting_id,
                    "giver_id": giver_id,
                    "receiver_id": receiver_id,
                },
            )
            return result.first() is not None

    async def list_active_for_meeting(
        self, tenant_id: UUID, meeting_id: UUID
    ) -> list[Proxy]:
        async with self._session_factory() as session:
            result = await session.execute(
                text(f"""
                    SELECT {_PROXY_COLUMNS}
                    FROM proxies
                    WHERE tenant_id = :tenant_id
                      AND meeting_id = :meeting_id
                      AND revoked_at IS NULL
                    ORDER BY created_at
                """),
                {"tenant_id": tenant_id, "meeting_id": meeting_id},
            )
            return [_row_to_proxy(row) for row in result.mappings()]
