"""PostgreSQL ballot repository.

save_if_motion_open reads the motion row FOR SHARE inside the write
transaction: a concurrent close (an UPDATE on that row) waits for the
ballot to commit, and a ballot arriving after the close sees closed_at.
Writers for the same (tenant, motion, voter) then serialize on an advisory
lock, so the supersede of one always sees the other's committed row and
at most one ballot per voter stays current.

The ``motions`` table is the one PostgresMotionRepository reads: the open
check here and the one in BallotService look at the same row.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from gavel.application.ports.ballot_repository import BallotRepositoryProtocol
from gavel.domain.models.ballot import Ballot, BallotSource, BallotValue

logger = get_logger(__name__)


def ballot_lock_key(tenant_id: UUID, motion_id: UUID, voter_member_id: UUID) -> str:
    return f"ballot:{tenant_id}:{motion_id}:{voter_member_id}"


def _row_to_ballot(row: Any) -> Ballot:
    return Ballot(
        motion_id=row["motion_id"],
        voter_member_id=row["voter_member_id"],
        value=BallotValue(row["value"]),
        weight=float(row["weight"]),
        is_proxy_vote=bool(row["is_proxy_vote"]),
        proxy_holder_id=row["proxy_holder_id"],
        cast_at=row["cast_at"],
        source=BallotSource(row["source"]),
        superseded_at=row["superseded_at"],
    )


class PostgresBallotRepository(BallotRepositoryProtocol):
    """Ballot persistence on PostgreSQL."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_for_motion(self, tenant_id: UUID, motion_id: UUID) -> list[Ballot]:
        async with self._session_factory() as session:
            result = await session.execute(
                text("""
                    SELECT motion_id, voter_member_id, value, weight, is_proxy_vote,
                           proxy_holder_id, cast_at, source, superseded_at
                    FROM ballots
                    WHERE tenant_id = :tenant_id
                      AND motion_id = :motion_id
                      AND superseded_at IS NULL
                    ORDER BY cast_at
                """),
                {"tenant_id": tenant_id, "motion_id": motion_id},
            )
            return [_row_to_ballot(row) for row in result.mappings()]

    async def save_if_motion_open(self, tenant_id: UUID, ballot: Ballot) -> bool:
        log = logger.bind(tenant_id=str(tenant_id), motion_id=str(ballot.motion_id))

        async with self._session_factory() as session, session.begin():
            open_row = await session.execute(
                text("""
                    SELECT 1
                    FROM motions
                    WHERE id = :motion_id
                      AND tenant_id = :tenant_id
                      AND opened_at IS NOT NULL
                      AND closed_at IS NULL
                    FOR SHARE
                """),
                {"motion_id": ballot.motion_id, "tenant_id": tenant_id},
            )
            if open_row.first() is None:
                log.debug("ballot_write_skipped_motion_closed")
                return False

            # FOR SHARE locks do not conflict with each other; two first-time
            # casts for one voter would both find nothing to supersede
            await session.execute(
                text("SELECT pg_advisory_xact_lock(hashtextextended(:key, 0))"),
                {"key": ballot_lock_key(tenant_id, ballot.motion_id, ballot.voter_member_id)},
            )
            await session.execute(
                text("""
                    UPDATE ballots
                    SET superseded_at = :cast_at
                    WHERE tenant_id = :tenant_id
                      AND motion_id = :motion_id
                      AND voter_member_id = :voter_member_id
                      AND superseded_at IS NULL
                """),
                {
                    "tenant_id": tenant_id,
                    "motion_id": ballot.motion_id,
                    "voter_member_id": ballot.voter_member_id,
                    "cast_at": ballot.cast_at,
                },
            )
            await session.execute(
                text("""
                    INSERT INTO ballots (
                        tenant_id, motion_id, voter_member_id, value, weight,
                        is_proxy_vote, proxy_holder_id, cast_at, source
                    )
                    VALUES (
                        :tenant_id, :motion_id, :voter_member_id, :value, :weight,
                        :is_proxy_vote, :proxy_holder_id, :cast_at, :source
                    )
                """),
                {
                    "tenant_id": tenant_id,
                    "motion_id": ballot.motion_id,
                    "voter_member_id": ballot.voter_member_id,
                    "value": ballot.value.value,
                    "weight": ballot.weight,
                    "is_proxy_vote": ballot.is_proxy_vote,
                    "proxy_holder_id": ballot.proxy_holder_id,
                    "cast_at": ballot.cast_at,
                    "source": ballot.source.value,
                },
            )
        return True
