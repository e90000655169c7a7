"""Member and eligible-base value objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True, eq=True)
class Member:
    """A voting member of a tenant.

    Attributes:
        id: Member identifier.
        tenant_id: Owning tenant.
        voting_power: Weight carried by the member's ballot.
        is_active: Inactive members cannot vote or hold proxies.
        full_name: Display name.
    """

    id: UUID
    tenant_id: UUID
    voting_power: float = field(default=1.0)
    is_active: bool = field(default=True)
    full_name: str = field(default="")


@dataclass(frozen=True, eq=True)
class EligibleBase:
    """Total eligible members and weight, the denominator for quorum ratios."""

    members: int
    weight: float

    def __post_init__(self) -> None:
        """Validate eligible base values."""
        if self.members < 0:
            raise ValueError(f"members must be non-negative, got {self.members}")
        if self.weight < 0:
            raise ValueError(f"weight must be non-negative, got {self.weight}")


@dataclass(frozen=True, eq=True)
class Participation:
    """Counted participation, the numerator for quorum ratios."""

    members: int
    weight: float
