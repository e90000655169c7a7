"""Quorum computation result DTOs.

The justification string is reproducible byte-for-byte from the same
inputs and is kept in audit trails.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from gavel.domain.models.policy import QuorumBasis, QuorumMode


class QuorumBlock(BaseModel):
    """One (basis, threshold) evaluation."""

    model_config = ConfigDict(frozen=True)

    configured: Annotated[
        bool,
        Field(description="False when a double-mode second condition is missing"),
    ] = True
    basis: Annotated[
        QuorumBasis | None,
        Field(description="eligible_members or eligible_weight"),
    ] = None
    ratio: Annotated[float, Field(ge=0.0, description="numerator / denominator")] = 0.0
    threshold: Annotated[float | None, Field(description="Threshold in force")] = None
    numerator: Annotated[float, Field(ge=0.0, description="Counted participation")] = 0.0
    denominator: Annotated[float, Field(description="Eligible base used")] = 0.0
    met: Annotated[bool, Field(description="ratio >= threshold")] = False


class QuorumNumerator(BaseModel):
    """Counted participation and the attendance modes that fed it."""

    model_config = ConfigDict(frozen=True)

    members: Annotated[int, Field(ge=0)]
    weight: Annotated[float, Field(ge=0.0)]
    modes: Annotated[
        tuple[str, ...],
        Field(description="Counted attendance modes, in policy order"),
    ]


class EligibleSummary(BaseModel):
    """Eligible members and weight."""

    model_config = ConfigDict(frozen=True)

    members: Annotated[int, Field(ge=0)]
    weight: Annotated[float, Field(ge=0.0)]


class LateRule(BaseModel):
    """Late-arrival exclusion in force for a computation."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    motion_opened_at: datetime | None = None


class QuorumDetails(BaseModel):
    """Everything that went into an applied quorum verdict."""

    model_config = ConfigDict(frozen=True)

    policy_id: UUID
    policy_name: str
    mode: QuorumMode
    convocation_no: Annotated[int, Field(ge=1, le=2)]
    primary: QuorumBlock
    secondary: QuorumBlock | None = None
    numerator: QuorumNumerator
    eligible: EligibleSummary
    late_rule: LateRule = LateRule()


class QuorumResult(BaseModel):
    """Outcome of a quorum computation.

    applied is False (and met None) when no policy is configured; absence
    of a policy never blocks a vote.
    """

    model_config = ConfigDict(frozen=True)

    applied: Annotated[bool, Field(description="Whether a policy was evaluated")]
    met: Annotated[
        bool | None,
        Field(description="Verdict, None when no policy applied"),
    ]
    justification: Annotated[str, Field(description="Audit-trail sentence")]
    details: Annotated[
        QuorumDetails | None,
        Field(description="Computation detail, None when no policy applied"),
    ] = None
