"""Motion result DTOs: tallies, majority block and decision."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from gavel.application.dtos.quorum import EligibleSummary, QuorumResult
from gavel.domain.models.motion import DecisionStatus
from gavel.domain.models.policy import VoteBase


class TallyBucket(BaseModel):
    """Count and weight of the ballots for one value."""

    model_config = ConfigDict(frozen=True)

    count: Annotated[int, Field(ge=0)] = 0
    weight: Annotated[float, Field(ge=0.0)] = 0.0


class Tally(BaseModel):
    """Ballots grouped by value, plus the expressed subtotal.

    ``for`` is a Python keyword, hence ``for_`` serialized as "for".
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    for_: Annotated[TallyBucket, Field(alias="for")] = TallyBucket()
    against: TallyBucket = TallyBucket()
    abstain: TallyBucket = TallyBucket()
    nsp: TallyBucket = TallyBucket()
    expressed: Annotated[
        TallyBucket,
        Field(description="for + against + abstain (nsp excluded)"),
    ] = TallyBucket()

    @property
    def total_ballots(self) -> int:
        """Ballots of any value, nsp included."""
        return self.expressed.count + self.nsp.count


class MajorityResult(BaseModel):
    """Majority evaluation under a vote policy."""

    model_config = ConfigDict(frozen=True)

    applied: bool
    base: VoteBase | None = None
    base_weight: Annotated[float, Field(ge=0.0)] = 0.0
    ratio: Annotated[float, Field(ge=0.0)] = 0.0
    threshold: float | None = None
    met: bool | None = None
    abstention_as_against: bool = False
    against_display_count: Annotated[
        int,
        Field(ge=0, description="against, plus abstain when merged for display"),
    ] = 0
    against_display_weight: Annotated[float, Field(ge=0.0)] = 0.0


class Decision(BaseModel):
    """Final status with its fixed reason sentence."""

    model_config = ConfigDict(frozen=True)

    status: DecisionStatus
    reason: str


class MotionResult(BaseModel):
    """Full result of a motion."""

    model_config = ConfigDict(frozen=True)

    motion_id: UUID
    meeting_id: UUID
    vote_policy_id: UUID | None = None
    quorum_policy_id: UUID | None = None
    tally: Tally
    eligible: EligibleSummary
    quorum: QuorumResult
    majority: MajorityResult
    decision: Decision
