"""Unit tests for the PostgreSQL adapters against a mocked AsyncSession.

These check statement parameters and row mapping; the locking itself is
exercised against a real database only.
"""

from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID

import pytest
from uuid6 import uuid7

from gavel.domain.models.ballot import Ballot, BallotValue
from gavel.domain.models.meeting import Meeting, MeetingStatus
from gavel.domain.models.motion import DecisionStatus
from gavel.domain.models.vote_token import TokenRejection
from gavel.infrastructure.adapters.persistence import (
    PostgresBallotRepository,
    PostgresMeetingRepository,
    PostgresMotionRepository,
    PostgresProxyRepository,
    PostgresVoteTokenRepository,
)

NOW = datetime(2026, 3, 1, 18, 0, tzinfo=timezone.utc)


def _session_factory(*results: Any) -> tuple[MagicMock, MagicMock]:
    """A factory whose sessions answer execute() with ``results`` in order."""
    session = MagicMock()
    session.execute = AsyncMock(side_effect=list(results))
    session.begin.return_value.__aexit__ = AsyncMock(return_value=False)

    factory = MagicMock()
    factory.return_value.__aenter__ = AsyncMock(return_value=session)
    factory.return_value.__aexit__ = AsyncMock(return_value=False)
    return factory, session


def _result(row: dict[str, Any] | None = None, rowcount: int = 0) -> MagicMock:
    result = MagicMock()
    result.mappings.return_value.first.return_value = row
    result.first.return_value = row
    result.rowcount = rowcount
    return result


def _token_row(tenant_id: UUID, **fields: Any) -> dict[str, Any]:
    row = {
        "token_hash": "f" * 64,
        "tenant_id": tenant_id,
        "meeting_id": uuid7(),
        "member_id": uuid7(),
        "motion_id": uuid7(),
        "expires_at": NOW + timedelta(hours=1),
        "used_at": None,
        "created_at": NOW,
    }
    row.update(fields)
    return row


class TestPostgresVoteTokenRepository:
    async def test_consume_if_valid_maps_returned_row(self, tenant_id: UUID) -> None:
        factory, session = _session_factory(_result(_token_row(tenant_id, used_at=NOW)))
        repo = PostgresVoteTokenRepository(factory)

        token = await repo.consume_if_valid("f" * 64, NOW)

        assert token is not None
        assert token.used_at == NOW
        params = session.execute.await_args.args[1]
        assert params == {"h": "f" * 64, "now": NOW}

    async def test_consume_if_valid_nothing_updated(self) -> None:
        factory, _ = _session_factory(_result(None))
        repo = PostgresVoteTokenRepository(factory)

        assert await repo.consume_if_valid("f" * 64, NOW) is None

    async def test_diagnose_unknown(self) -> None:
        factory, _ = _session_factory(_result(None))
        repo = PostgresVoteTokenRepository(factory)

        assert await repo.diagnose_failure("f" * 64, NOW) is TokenRejection.NOT_FOUND

    async def test_diagnose_expired(self, tenant_id: UUID) -> None:
        row = _token_row(tenant_id, expires_at=NOW - timedelta(seconds=1))
        factory, _ = _session_factory(_result(row))
        repo = PostgresVoteTokenRepository(factory)

        assert await repo.diagnose_failure("f" * 64, NOW) is TokenRejection.EXPIRED

    async def test_revoke_for_motion_returns_rowcount(self, tenant_id: UUID) -> None:
        factory, _ = _session_factory(_result(rowcount=4))
        repo = PostgresVoteTokenRepository(factory)

        assert await repo.revoke_for_motion(tenant_id, uuid7(), NOW) == 4


class TestPostgresProxyRepository:
    async def test_lock_scope_locks_sorted_distinct_members(self, tenant_id: UUID) -> None:
        """Advisory locks are taken once per member in a stable order."""
        a, b = sorted([uuid7(), uuid7()], key=str)
        meeting_id = uuid7()
        factory, session = _session_factory(_result(), _result())
        repo = PostgresProxyRepository(factory)

        async with repo.lock_scope(tenant_id, meeting_id, [b, a, b]):
            pass

        keys = [call.args[1]["key"] for call in session.execute.await_args_list]
        assert keys == [
            f"proxy:{tenant_id}:{meeting_id}:{a}",
            f"proxy:{tenant_id}:{meeting_id}:{b}",
        ]

    @pytest.mark.parametrize(("rowcount", "expected"), [(1, True), (0, False)])
    async def test_revoke_for_giver(
        self, tenant_id: UUID, rowcount: int, expected: bool
    ) -> None:
        factory, _ = _session_factory(_result(rowcount=rowcount))
        repo = PostgresProxyRepository(factory)

        assert await repo.revoke_for_giver(tenant_id, uuid7(), uuid7(), NOW) is expected


class TestPostgresBallotRepository:
    async def test_closed_motion_skips_write(self, tenant_id: UUID) -> None:
        """Only the FOR SHARE lookup runs when the motion is not open."""
        factory, session = _session_factory(_result(None))
        repo = PostgresBallotRepository(factory)

        saved = await repo.save_if_motion_open(
            tenant_id, Ballot(motion_id=uuid7(), voter_member_id=uuid7(), value=BallotValue.FOR)
        )

        assert saved is False
        assert session.execute.await_count == 1

    async def test_open_motion_locks_voter_supersedes_then_inserts(
        self, tenant_id: UUID
    ) -> None:
        """The voter lock sits between the motion check and the supersede."""
        factory, session = _session_factory(
            _result({"id": uuid7()}), _result(), _result(), _result()
        )
        repo = PostgresBallotRepository(factory)
        ballot = Ballot(motion_id=uuid7(), voter_member_id=uuid7(), value=BallotValue.NSP)

        saved = await repo.save_if_motion_open(tenant_id, ballot)

        assert saved is True
        calls = session.execute.await_args_list
        statements = [str(call.args[0]) for call in calls]
        assert "FOR SHARE" in statements[0]
        assert "pg_advisory_xact_lock" in statements[1]
        assert calls[1].args[1] == {
            "key": f"ballot:{tenant_id}:{ballot.motion_id}:{ballot.voter_member_id}"
        }
        assert "UPDATE ballots" in statements[2]
        assert "INSERT INTO ballots" in statements[3]


class TestPostgresMeetingRepository:
    async def test_get_maps_row(self, tenant_id: UUID) -> None:
        meeting_id = uuid7()
        row = {
            "id": meeting_id,
            "tenant_id": tenant_id,
            "status": "live",
            "convocation_no": 2,
            "title": None,
            "quorum_policy_id": None,
            "vote_policy_id": None,
            "validated_at": None,
        }
        factory, session = _session_factory(_result(row))
        repo = PostgresMeetingRepository(factory)

        meeting = await repo.get(tenant_id, meeting_id)

        assert meeting == Meeting(
            id=meeting_id, tenant_id=tenant_id, status=MeetingStatus.LIVE, convocation_no=2
        )
        assert session.execute.await_args.args[1] == {
            "meeting_id": meeting_id,
            "tenant_id": tenant_id,
        }

    @pytest.mark.parametrize(("rowcount", "expected"), [(1, True), (0, False)])
    async def test_save_if_status_is_conditional(
        self, tenant_id: UUID, rowcount: int, expected: bool
    ) -> None:
        """The UPDATE filters on the status the caller checked."""
        factory, session = _session_factory(_result(rowcount=rowcount))
        repo = PostgresMeetingRepository(factory)
        meeting = Meeting(id=uuid7(), tenant_id=tenant_id, status=MeetingStatus.CLOSED)

        saved = await repo.save_if_status(meeting, MeetingStatus.LIVE)

        assert saved is expected
        statement = str(session.execute.await_args.args[0])
        params = session.execute.await_args.args[1]
        assert "status = :expected" in statement
        assert params["status"] == "closed"
        assert params["expected"] == "live"
        assert params["tenant_id"] == tenant_id


class TestPostgresMotionRepository:
    async def test_get_maps_row(self, tenant_id: UUID) -> None:
        motion_id = uuid7()
        row = {
            "id": motion_id,
            "meeting_id": uuid7(),
            "tenant_id": tenant_id,
            "title": "Budget",
            "vote_policy_id": None,
            "quorum_policy_id": None,
            "secret": False,
            "opened_at": NOW,
            "closed_at": NOW + timedelta(minutes=5),
            "decision_status": "adopted",
        }
        factory, _ = _session_factory(_result(row))
        repo = PostgresMotionRepository(factory)

        motion = await repo.get(tenant_id, motion_id)

        assert motion is not None
        assert motion.is_closed
        assert motion.decision_status is DecisionStatus.ADOPTED

    async def test_get_missing(self, tenant_id: UUID) -> None:
        factory, _ = _session_factory(_result(None))
        repo = PostgresMotionRepository(factory)

        assert await repo.get(tenant_id, uuid7()) is None
