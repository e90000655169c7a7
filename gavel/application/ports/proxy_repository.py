"""Proxy repository port.

Chain and cap checks must observe a state no concurrent upsert can change
before the write lands. lock_scope yields a session holding exclusive
locks on the given members' delegations within a meeting; the checks and
the upsert run inside it and commit together on exit.
"""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import AbstractAsyncContextManager
from datetime import datetime
from typing import Protocol, runtime_checkable
from uuid import UUID

from gavel.domain.models.proxy import Proxy


@runtime_checkable
class LockedProxySessionProtocol(Protocol):
    """Operations allowed while the proxy locks are held."""

    async def count_active_as_giver(self, member_id: UUID) -> int:
        """Active delegations the member gives in the locked meeting."""
        ...

    async def count_active_as_receiver(
        self, member_id: UUID, exclude_giver_id: UUID | None = None
    ) -> int:
        """Active delegations the member receives, optionally ignoring one giver."""
        ...

    async def upsert(self, proxy: Proxy) -> Proxy:
        """Replace the giver's active delegation with ``proxy``."""
        ...


@runtime_checkable
class ProxyRepositoryProtocol(Protocol):
    """Persistence for proxy delegations."""

    def lock_scope(
        self, tenant_id: UUID, meeting_id: UUID, member_ids: Sequence[UUID]
    ) -> AbstractAsyncContextManager[LockedProxySessionProtocol]:
        """Open a transaction locking the delegations of ``member_ids``.

        Locks are taken in a stable order so two scopes never deadlock.
        Leaving the block commits; an exception rolls back.
        """
        ...

    async def revoke_for_giver(
        self, tenant_id: UUID, meeting_id: UUID, giver_id: UUID, revoked_at: datetime
    ) -> bool:
        """Deactivate the giver's active delegation.

        Returns:
            True if a delegation was revoked, False if there was none.
        """
        ...

    async def has_active_proxy(
        self, tenant_id: UUID, meeting_id: UUID, giver_id: UUID, receiver_id: UUID
    ) -> bool:
        """Check for an active giver -> receiver delegation in the meeting."""
        ...

    async def list_active_for_meeting(
        self, tenant_id: UUID, meeting_id: UUID
    ) -> list[Proxy]:
        """List the active delegations of a meeting."""
        ...
