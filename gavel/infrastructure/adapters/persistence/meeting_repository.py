"""PostgreSQL meeting and motion repositories.

Tables ``meetings`` and ``motions`` are shared with the host application,
which creates meetings and opens or closes motions. Gavel only moves a
meeting's status, with a conditional UPDATE on the status it checked.

PostgresBallotRepository locks the same ``motions`` row when it writes a
ballot, so BallotService's open check and the write agree on one source.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from gavel.application.ports.meeting_repository import (
    MeetingRepositoryProtocol,
    MotionRepositoryProtocol,
)
from gavel.domain.models.meeting import Meeting, MeetingStatus
from gavel.domain.models.motion import DecisionStatus, Motion

logger = get_logger(__name__)

_MOTION_COLUMNS = """
    id, meeting_id, tenant_id, title, vote_policy_id, quorum_policy_id,
    secret, opened_at, closed_at, decision_status
"""


def _row_to_meeting(row: Any) -> Meeting:
    return Meeting(
        id=row["id"],
        tenant_id=row["tenant_id"],
        status=MeetingStatus(row["status"]),
        convocation_no=int(row["convocation_no"]),
        title=row["title"] or "",
        quorum_policy_id=row["quorum_policy_id"],
        vote_policy_id=row["vote_policy_id"],
        validated_at=row["validated_at"],
    )


def _row_to_motion(row: Any) -> Motion:
    decision = row["decision_status"]
    return Motion(
        id=row["id"],
        meeting_id=row["meeting_id"],
        tenant_id=row["tenant_id"],
        title=row["title"] or "",
        vote_policy_id=row["vote_policy_id"],
        quorum_policy_id=row["quorum_policy_id"],
        secret=bool(row["secret"]),
        opened_at=row["opened_at"],
        closed_at=row["closed_at"],
        decision_status=DecisionStatus(decision) if decision else None,
    )


class PostgresMeetingRepository(MeetingRepositoryProtocol):
    """Meeting reads and status compare-and-swap on PostgreSQL."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, tenant_id: UUID, meeting_id: UUID) -> Meeting | None:
        async with self._session_factory() as session:
            result = await session.execute(
                text("""
                    SELECT id, tenant_id, status, convocation_no, title,
                           quorum_policy_id, vote_policy_id, validated_at
                    FROM meetings
                    WHERE id = :meeting_id AND tenant_id = :tenant_id
                """),
                {"meeting_id": meeting_id, "tenant_id": tenant_id},
            )
            row = result.mappings().first()
            return _row_to_meeting(row) if row is not None else None

    async def save_if_status(self, meeting: Meeting, expected: MeetingStatus) -> bool:
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                text("""
                    UPDATE meetings
                    SET status = :status, validated_at = :validated_at
                    WHERE id = :meeting_id
                      AND tenant_id = :tenant_id
                      AND status = :expected
                """),
                {
                    "status": meeting.status.value,
                    "validated_at": meeting.validated_at,
                    "meeting_id": meeting.id,
                    "tenant_id": meeting.tenant_id,
                    "expected": expected.value,
                },
            )
            saved = result.rowcount == 1
        if not saved:
            logger.debug(
                "meeting_status_swap_missed",
                meeting_id=str(meeting.id),
                expected=expected.value,
            )
        return saved


class PostgresMotionRepository(MotionRepositoryProtocol):
    """Motion reads on PostgreSQL."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, tenant_id: UUID, motion_id: UUID) -> Motion | None:
        async with self._session_factory() as session:
            result = await session.execute(
                text(f"""
                    SELECT {_MOTION_COLUMNS}
                    FROM motions
                    WHERE id = :motion_id AND tenant_id = :tenant_id
                """),
                {"motion_id": motion_id, "tenant_id": tenant_id},
            )
            row = result.mappings().first()
            return _row_to_motion(row) if row is not None else None

    async def list_for_meeting(self, tenant_id: UUID, meeting_id: UUID) -> list[Motion]:
        async with self._session_factory() as session:
            result = await session.execute(
                text(f"""
                    SELECT {_MOTION_COLUMNS}
                    FROM motions
                    WHERE meeting_id = :meeting_id AND tenant_id = :tenant_id
                    ORDER BY id
                """),
                {"meeting_id": meeting_id, "tenant_id": tenant_id},
            )
            return [_row_to_motion(row) for row in result.mappings()]
