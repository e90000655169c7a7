"""Ballot repository port.

save_if_motion_open is a compare-and-swap: the write happens only while
the motion is still open, so a ballot racing a close cannot slip in.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable
from uuid import UUID

from gavel.domain.models.ballot import Ballot


@runtime_checkable
class BallotRepositoryProtocol(Protocol):
    """Persistence for ballots."""

    async def list_for_motion(self, tenant_id: UUID, motion_id: UUID) -> list[Ballot]:
        """List the current (non-superseded) ballots of a motion."""
        ...

    async def save_if_motion_open(self, tenant_id: UUID, ballot: Ballot) -> bool:
        """Store a ballot if the motion is still open.

        Any current ballot of the same voter on the same motion is marked
        superseded in the same atomic step.

        Returns:
            True if stored, False if the motion was not open.
        """
        ...
