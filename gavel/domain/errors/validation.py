"""Request validation errors.

Raised synchronously when identifiers are missing or malformed. These are
never retried automatically.
"""

from __future__ import annotations

from gavel.domain.exceptions import ValidationError


class InvalidRequestError(ValidationError):
    """Raised when a required identifier or field is missing or malformed.

    Attributes:
        field_name: Name of the offending field.
    """

    code = "invalid_request"

    def __init__(self, field_name: str, detail: str | None = None) -> None:
        self.field_name = field_name
        message = f"Invalid request: {field_name} is required"
        if detail:
            message = f"Invalid request: {field_name} {detail}"
        super().__init__(message)


class InvalidVoteValueError(ValidationError):
    """Raised when a ballot value is not one of for/against/abstain/nsp."""

    code = "invalid_vote_value"

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(
            f"Invalid vote value {value!r}: expected for, against, abstain or nsp"
        )


class InvalidThresholdError(ValidationError, ValueError):
    """Raised when a quorum or majority threshold lies outside [0, 1]."""

    code = "invalid_threshold"

    def __init__(self, name: str, value: float) -> None:
        self.name = name
        self.value = value
        super().__init__(f"{name} must be between 0 and 1, got {value}")
