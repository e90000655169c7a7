"""Proxy listing and integrity audit DTOs."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ProxyView(BaseModel):
    """An active delegation."""

    model_config = ConfigDict(frozen=True)

    giver_member_id: UUID
    receiver_member_id: UUID
    created_at: datetime


class ProxyChain(BaseModel):
    """A member that both gives and receives delegations."""

    model_config = ConfigDict(frozen=True)

    member_id: UUID
    delegates_to: UUID
    received_from: tuple[UUID, ...]


class ProxyCycle(BaseModel):
    """Two members delegating to each other."""

    model_config = ConfigDict(frozen=True)

    member_a: UUID
    member_b: UUID


class CapViolation(BaseModel):
    """A receiver holding more delegations than allowed."""

    model_config = ConfigDict(frozen=True)

    receiver_member_id: UUID
    count: Annotated[int, Field(ge=0)]
    max_allowed: Annotated[int, Field(ge=1)]


class ProxyIntegrityReport(BaseModel):
    """Integrity audit of a meeting's delegation graph.

    orphans lists delegations whose receiver is not checked in as present
    or remote, so the delegated vote cannot be cast.
    """

    model_config = ConfigDict(frozen=True)

    meeting_id: UUID
    active_count: Annotated[int, Field(ge=0)]
    chains: tuple[ProxyChain, ...] = ()
    cycles: tuple[ProxyCycle, ...] = ()
    cap_violations: tuple[CapViolation, ...] = ()
    orphans: tuple[ProxyView, ...] = ()

    @property
    def is_clean(self) -> bool:
        """Check if the audit found nothing."""
        return not (self.chains or self.cycles or self.cap_violations or self.orphans)
