"""In-memory ballot repository.

The open-motion check and the write run without an await in between, so
under asyncio they are atomic with respect to MotionRepositoryStub.close.
"""

from __future__ import annotations

from dataclasses import replace
from uuid import UUID

from gavel.application.ports.ballot_repository import BallotRepositoryProtocol
from gavel.domain.models.ballot import Ballot
from gavel.infrastructure.stubs.meeting_repository_stub import MotionRepositoryStub


class BallotRepositoryStub(BallotRepositoryProtocol):
    """Ballot history per motion, superseded ballots kept."""

    def __init__(self, motions: MotionRepositoryStub) -> None:
        self._motions = motions
        self._ballots: dict[UUID, list[Ballot]] = {}

    async def list_for_motion(self, tenant_id: UUID, motion_id: UUID) -> list[Ballot]:
        motion = self._motions.peek(motion_id)
        if motion is None or motion.tenant_id != tenant_id:
            return []
        return [b for b in self._ballots.get(motion_id, []) if b.is_current]

    async def save_if_motion_open(self, tenant_id: UUID, ballot: Ballot) -> bool:
        motion = self._motions.peek(ballot.motion_id)
        if motion is None or motion.tenant_id != tenant_id or not motion.is_open:
            return False

        history = self._ballots.setdefault(ballot.motion_id, [])
        for index, previous in enumerate(history):
            if previous.voter_member_id == ballot.voter_member_id and previous.is_current:
                history[index] = replace(previous, superseded_at=ballot.cast_at)
        history.append(ballot)
        return True

    def history(self, motion_id: UUID) -> list[Ballot]:
        """Every ballot ever stored for a motion, superseded included."""
        return list(self._ballots.get(motion_id, []))
