"""Vote token errors.

Each subclass maps one-to-one onto a rejection reason code. Losing a
concurrent consumption race surfaces as ``token_already_used``.
"""

from __future__ import annotations

from gavel.domain.exceptions import StateError


class VoteTokenRejectedError(StateError):
    """Base class for token rejections.

    Attributes:
        token_hash: HMAC digest of the presented token (never the raw token).
    """

    code = "token_rejected"

    def __init__(self, token_hash: str) -> None:
        self.token_hash = token_hash
        super().__init__(f"Vote token rejected: {self.code}")


class TokenEmptyError(VoteTokenRejectedError):
    code = "token_empty"


class TokenNotFoundError(VoteTokenRejectedError):
    code = "token_not_found"


class TokenAlreadyUsedError(VoteTokenRejectedError):
    code = "token_already_used"


class TokenExpiredError(VoteTokenRejectedError):
    code = "token_expired"


REJECTION_ERRORS: dict[str, type[VoteTokenRejectedError]] = {
    TokenEmptyError.code: TokenEmptyError,
    TokenNotFoundError.code: TokenNotFoundError,
    TokenAlreadyUsedError.code: TokenAlreadyUsedError,
    TokenExpiredError.code: TokenExpiredError,
}
