"""Base exception classes for the Gavel domain layer."""


class GavelError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class.
    Every subclass defines a machine-readable ``code`` so callers can map
    failures to responses without parsing messages.

    Attributes:
        code: Machine-readable reason code.
    """

    code: str = "gavel_error"

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description (operator-facing).
        """
        super().__init__(message)


class ValidationError(GavelError):
    """Malformed or inconsistent input, rejected before any write."""

    code = "invalid_request"


class StateError(GavelError):
    """The request is well-formed but the current state forbids it."""

    code = "invalid_state"


class NotFoundError(GavelError):
    """A referenced resource does not exist for the given tenant."""

    code = "not_found"
