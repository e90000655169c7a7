"""In-memory proxy repository with per-member locks.

lock_scope takes one asyncio.Lock per (tenant, meeting, member), in
sorted order, mirroring the advisory locks of the PostgreSQL adapter.
Every session call yields to the event loop, like a database round-trip,
so unlocked check-then-write sequences would interleave.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Sequence
from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import replace
from datetime import datetime
from uuid import UUID

from gavel.application.ports.proxy_repository import (
    LockedProxySessionProtocol,
    ProxyRepositoryProtocol,
)
from gavel.domain.models.proxy import Proxy


class _LockedProxySession(LockedProxySessionProtocol):
    def __init__(
        self, repository: ProxyRepositoryStub, tenant_id: UUID, meeting_id: UUID
    ) -> None:
        self._repository = repository
        self._tenant_id = tenant_id
        self._meeting_id = meeting_id

    async def count_active_as_giver(self, member_id: UUID) -> int:
        await asyncio.sleep(0)
        return sum(
            1
            for p in self._repository.active(self._tenant_id, self._meeting_id)
            if p.giver_member_id == member_id
        )

    async def count_active_as_receiver(
        self, member_id: UUID, exclude_giver_id: UUID | None = None
    ) -> int:
        await asyncio.sleep(0)
        return sum(
            1
            for p in self._repository.active(self._tenant_id, self._meeting_id)
            if p.receiver_member_id == member_id
            and p.giver_member_id != exclude_giver_id
        )

    async def upsert(self, proxy: Proxy) -> Proxy:
        await asyncio.sleep(0)
        self._repository.deactivate_giver(
            proxy.tenant_id, proxy.meeting_id, proxy.giver_member_id, proxy.created_at
        )
        self._repository.proxies.append(proxy)
        return proxy


class ProxyRepositoryStub(ProxyRepositoryProtocol):
    """Proxy rows in a list; revoked rows are kept inactive."""

    def __init__(self) -> None:
        self.proxies: list[Proxy] = []
        self._locks: dict[tuple[UUID, UUID, UUID], asyncio.Lock] = {}
        # Holders and waiters per lock; the entry goes once nobody uses it
        self._lock_users: dict[tuple[UUID, UUID, UUID], int] = {}

    def active(self, tenant_id: UUID, meeting_id: UUID) -> list[Proxy]:
        return [
            p
            for p in self.proxies
            if p.active and p.tenant_id == tenant_id and p.meeting_id == meeting_id
        ]

    def deactivate_giver(
        self, tenant_id: UUID, meeting_id: UUID, giver_id: UUID, at: datetime
    ) -> bool:
        revoked = False
        for index, proxy in enumerate(self.proxies):
            if (
                proxy.active
                and proxy.tenant_id == tenant_id
                and proxy.meeting_id == meeting_id
                and proxy.giver_member_id == giver_id
            ):
                self.proxies[index] = proxy.revoked(at)
                revoked = True
        return revoked

    def add(self, proxy: Proxy) -> Proxy:
        """Insert a row as-is, bypassing every check (seeding audits)."""
        self.proxies.append(proxy)
        return proxy

    @asynccontextmanager
    async def _member_lock(self, key: tuple[UUID, UUID, UUID]) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[key] -= 1
            if self._lock_users[key] == 0:
                del self._lock_users[key]
                del self._locks[key]

    def lock_count(self) -> int:
        """Member locks currently held or awaited."""
        return len(self._locks)

    @asynccontextmanager
    async def lock_scope(
        self, tenant_id: UUID, meeting_id: UUID, member_ids: Sequence[UUID]
    ) -> AsyncIterator[LockedProxySessionProtocol]:
        async with AsyncExitStack() as stack:
            for member_id in sorted(set(member_ids), key=str):
                await stack.enter_async_context(
                    self._member_lock((tenant_id, meeting_id, member_id))
                )
            yield _LockedProxySession(self, tenant_id, meeting_id)

    async def revoke_for_giver(
        self, tenant_id: UUID, meeting_id: UUID, giver_id: UUID, revoked_at: datetime
    ) -> bool:
        return self.deactivate_giver(tenant_id, meeting_id, giver_id, revoked_at)

    async def has_active_proxy(
        self, tenant_id: UUID, meeting_id: UUID, giver_id: UUID, receiver_id: UUID
    ) -> bool:
        return any(
            p.giver_member_id == giver_id and p.receiver_member_id == receiver_id
            for p in self.active(tenant_id, meeting_id)
        )

    async def list_active_for_meeting(
        self, tenant_id: UUID, meeting_id: UUID
    ) -> list[Proxy]:
        return self.active(tenant_id, meeting_id)
