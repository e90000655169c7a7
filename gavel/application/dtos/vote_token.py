"""Vote token DTOs.

The raw token appears only in IssuedVoteToken, returned once to the
caller at generation time. It is never stored or logged.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class IssuedVoteToken(BaseModel):
    """A freshly generated token."""

    model_config = ConfigDict(frozen=True)

    token: Annotated[
        str,
        Field(min_length=64, max_length=64, description="Raw token (hex)"),
    ]
    token_hash: Annotated[
        str,
        Field(min_length=64, max_length=64, description="HMAC-SHA256 hex digest"),
    ]
    expires_at: datetime


class TokenValidation(BaseModel):
    """Outcome of validating (or consuming) a token."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    token_hash: Annotated[str, Field(description="Empty for an empty token")]
    reason: Annotated[
        str | None,
        Field(description="token_empty, token_not_found, token_already_used, token_expired"),
    ] = None
    meeting_id: UUID | None = None
    member_id: UUID | None = None
    motion_id: UUID | None = None
