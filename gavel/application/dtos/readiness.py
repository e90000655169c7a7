"""Meeting transition readiness DTOs."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from gavel.domain.governance.roles import Role
from gavel.domain.models.meeting import MeetingStatus


class ReadinessIssue(BaseModel):
    """A blocking issue or a warning."""

    model_config = ConfigDict(frozen=True)

    code: str
    count: Annotated[
        int | None,
        Field(description="Number of offending items, when countable"),
    ] = None


class TransitionCheck(BaseModel):
    """Pre-transition checks for one target status."""

    model_config = ConfigDict(frozen=True)

    from_status: MeetingStatus
    to_status: MeetingStatus
    issues: tuple[ReadinessIssue, ...] = ()
    warnings: tuple[ReadinessIssue, ...] = ()

    @property
    def can_proceed(self) -> bool:
        """Warnings never block; issues do."""
        return not self.issues


class TransitionReadiness(BaseModel):
    """Readiness of every outgoing transition of a meeting."""

    model_config = ConfigDict(frozen=True)

    meeting_id: UUID
    current_status: MeetingStatus
    transitions: tuple[TransitionCheck, ...] = ()


class AvailableTransition(BaseModel):
    """A transition the principal may perform, with the role it requires."""

    model_config = ConfigDict(frozen=True)

    to_status: MeetingStatus
    required_role: Role
