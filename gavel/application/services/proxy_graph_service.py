"""Proxy delegation graph for a meeting.

The active relation stays a forest of depth 1: nobody is both an active
giver and an active receiver, each giver has at most one active
delegation, and each receiver holds at most ``max_per_receiver``.

Every check that does not need the lock runs before it is taken. The
chain and cap checks run inside ``lock_scope`` together with the write,
so two concurrent upserts toward one receiver cannot both see room left.
"""

from __future__ import annotations

from collections import defaultdict
from uuid import UUID

from structlog import get_logger
from uuid6 import uuid7

from gavel.application.dtos.proxy_report import (
    CapViolation,
    ProxyChain,
    ProxyCycle,
    ProxyIntegrityReport,
    ProxyView,
)
from gavel.application.ports.attendance_repository import (
    AttendanceRepositoryProtocol,
    MemberDirectoryProtocol,
)
from gavel.application.ports.meeting_repository import MeetingRepositoryProtocol
from gavel.application.ports.proxy_repository import ProxyRepositoryProtocol
from gavel.application.ports.time_authority import TimeAuthorityProtocol
from gavel.domain.errors import (
    InvalidMemberError,
    InvalidRequestError,
    MeetingNotFoundError,
    ProxyCapExceededError,
    ProxyChainForbiddenError,
    SelfDelegationError,
)
from gavel.domain.models.proxy import Proxy

logger = get_logger(__name__)

DEFAULT_MAX_PER_RECEIVER = 99


class ProxyGraphService:
    """Creates, replaces, revokes and audits delegations."""

    def __init__(
        self,
        proxies: ProxyRepositoryProtocol,
        meetings: MeetingRepositoryProtocol,
        members: MemberDirectoryProtocol,
        attendance: AttendanceRepositoryProtocol,
        time_authority: TimeAuthorityProtocol,
        max_per_receiver: int = DEFAULT_MAX_PER_RECEIVER,
    ) -> None:
        if max_per_receiver < 1:
            raise ValueError(
                f"max_per_receiver must be at least 1, got {max_per_receiver}"
            )
        self._proxies = proxies
        self._meetings = meetings
        self._members = members
        self._attendance = attendance
        self._time = time_authority
        self._max_per_receiver = max_per_receiver

    async def upsert(
        self,
        tenant_id: UUID,
        meeting_id: UUID,
        giver_id: UUID | None,
        receiver_id: UUID | None,
    ) -> Proxy | None:
        """Create or replace the giver's delegation.

        A missing receiver revokes the giver's delegation instead.

        Returns:
            The active proxy, or None when the call was a revoke.

        Raises:
            InvalidRequestError: giver_id missing.
            SelfDelegationError: giver_id == receiver_id.
            MeetingNotFoundError: Meeting unknown for the tenant.
            InvalidMemberError: Giver or receiver not a member.
            ProxyChainForbiddenError: Delegation would form a chain.
            ProxyCapExceededError: Receiver already at the cap.
        """
        if giver_id is None:
            raise InvalidRequestError("giver_member_id")
        if receiver_id is not None and giver_id == receiver_id:
            raise SelfDelegationError(giver_id)

        log = logger.bind(
            tenant_id=str(tenant_id),
            meeting_id=str(meeting_id),
            giver_id=str(giver_id),
            receiver_id=str(receiver_id) if receiver_id else None,
        )

        if await self._meetings.get(tenant_id, meeting_id) is None:
            raise MeetingNotFoundError(meeting_id, tenant_id)
        if not await self._members.is_meeting_member(tenant_id, meeting_id, giver_id):
            raise InvalidMemberError(giver_id, meeting_id, "giver")

        if receiver_id is None:
            await self.revoke(tenant_id, meeting_id, giver_id)
            return None

        if not await self._members.is_meeting_member(
            tenant_id, meeting_id, receiver_id
        ):
            raise InvalidMemberError(receiver_id, meeting_id, "receiver")

        async with self._proxies.lock_scope(
            tenant_id, meeting_id, (giver_id, receiver_id)
        ) as session:
            if await session.count_active_as_giver(receiver_id) > 0:
                log.info("proxy_rejected", code=ProxyChainForbiddenError.code)
                raise ProxyChainForbiddenError(
                    meeting_id, receiver_id, "receiver already delegates"
                )
            if await session.count_active_as_receiver(giver_id) > 0:
                log.info("proxy_rejected", code=ProxyChainForbiddenError.code)
                raise ProxyChainForbiddenError(
                    meeting_id, giver_id, "giver already holds proxies"
                )

            held = await session.count_active_as_receiver(
                receiver_id, exclude_giver_id=giver_id
            )
            if held >= self._max_per_receiver:
                log.info(
                    "proxy_rejected",
                    code=ProxyCapExceededError.code,
                    held=held,
                    max_allowed=self._max_per_receiver,
                )
                raise ProxyCapExceededError(
                    meeting_id, receiver_id, held, self._max_per_receiver
                )

            proxy = await session.upsert(
                Proxy(
                    id=uuid7(),
                    tenant_id=tenant_id,
                    meeting_id=meeting_id,
                    giver_member_id=giver_id,
                    receiver_member_id=receiver_id,
                    created_at=self._time.now(),
                )
            )

        log.info("proxy_upserted", proxy_id=str(proxy.id))
        return proxy

    async def revoke(self, tenant_id: UUID, meeting_id: UUID, giver_id: UUID) -> bool:
        """Deactivate the giver's delegation; a no-op when there is none.

        Returns:
            True if a delegation was revoked.
        """
        revoked = await self._proxies.revoke_for_giver(
            tenant_id, meeting_id, giver_id, self._time.now()
        )
        logger.info(
            "proxy_revoked",
            tenant_id=str(tenant_id),
            meeting_id=str(meeting_id),
            giver_id=str(giver_id),
            revoked=revoked,
        )
        return revoked

    async def has_active_proxy(
        self,
        tenant_id: UUID,
        meeting_id: UUID,
        giver_id: UUID,
        receiver_id: UUID,
    ) -> bool:
        """Check for an active giver -> receiver delegation in this meeting only."""
        return await self._proxies.has_active_proxy(
            tenant_id, meeting_id, giver_id, receiver_id
        )

    async def list_for_meeting(
        self, tenant_id: UUID, meeting_id: UUID
    ) -> list[ProxyView]:
        """Active delegations of a meeting, oldest first."""
        proxies = await self._proxies.list_active_for_meeting(tenant_id, meeting_id)
        return [
            _view(proxy) for proxy in sorted(proxies, key=lambda p: p.created_at)
        ]

    async def audit_integrity(
        self, tenant_id: UUID, meeting_id: UUID
    ) -> ProxyIntegrityReport:
        """Report chains, reciprocal cycles, cap violations and orphans.

        The write path prevents all four; the audit catches rows written
        around it (imports, manual fixes, a lowered cap).
        """
        proxies = await self._proxies.list_active_for_meeting(tenant_id, meeting_id)
        attendance = await self._attendance.list_for_meeting(tenant_id, meeting_id)
        present = {r.member_id for r in attendance if r.is_present_direct}

        gives_to: dict[UUID, UUID] = {}
        received: dict[UUID, list[UUID]] = defaultdict(list)
        for proxy in proxies:
            gives_to[proxy.giver_member_id] = proxy.receiver_member_id
            received[proxy.receiver_member_id].append(proxy.giver_member_id)

        chains = [
            ProxyChain(
                member_id=member_id,
                delegates_to=gives_to[member_id],
                received_from=tuple(sorted(received[member_id], key=str)),
            )
            for member_id in sorted(gives_to, key=str)
            if member_id in received
        ]
        cycles = [
            ProxyCycle(member_a=giver, member_b=receiver)
            for giver, receiver in sorted(gives_to.items(), key=lambda kv: str(kv[0]))
            if gives_to.get(receiver) == giver and str(giver) < str(receiver)
        ]
        cap_violations = [
            CapViolation(
                receiver_member_id=receiver,
                count=len(givers),
                max_allowed=self._max_per_receiver,
            )
            for receiver, givers in sorted(received.items(), key=lambda kv: str(kv[0]))
            if len(givers) > self._max_per_receiver
        ]
        orphans = [
            _view(proxy)
            for proxy in proxies
            if proxy.receiver_member_id not in present
        ]

        report = ProxyIntegrityReport(
            meeting_id=meeting_id,
            active_count=len(proxies),
            chains=tuple(chains),
            cycles=tuple(cycles),
            cap_violations=tuple(cap_violations),
            orphans=tuple(orphans),
        )
        if not report.is_clean:
            logger.warning(
                "proxy_integrity_issues",
                tenant_id=str(tenant_id),
                meeting_id=str(meeting_id),
                chains=len(chains),
                cycles=len(cycles),
                cap_violations=len(cap_violations),
                orphans=len(orphans),
            )
        return report


def _view(proxy: Proxy) -> ProxyView:
    return ProxyView(
        giver_member_id=proxy.giver_member_id,
        receiver_member_id=proxy.receiver_member_id,
        created_at=proxy.created_at,
    )
