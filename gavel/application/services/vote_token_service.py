"""Anonymous single-use vote tokens.

Raw tokens are 64 hex chars (256 random bits) handed to the caller once.
Only HMAC-SHA256(token, secret) is persisted or compared, so a leaked
token table cannot be replayed.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
from datetime import timedelta
from uuid import UUID

from structlog import get_logger

from gavel.application.dtos.vote_token import IssuedVoteToken, TokenValidation
from gavel.application.ports.meeting_repository import MeetingRepositoryProtocol
from gavel.application.ports.time_authority import TimeAuthorityProtocol
from gavel.application.ports.vote_token_repository import VoteTokenRepositoryProtocol
from gavel.domain.errors import InvalidRequestError, MeetingNotFoundError
from gavel.domain.errors.vote_token import REJECTION_ERRORS, TokenEmptyError
from gavel.domain.models.vote_token import TokenRejection, VoteToken

logger = get_logger(__name__)

TOKEN_BYTES = 32
DEFAULT_TTL_SECONDS = 3600
MIN_TTL_SECONDS = 60


class VoteTokenService:
    """Issues, validates and consumes vote tokens."""

    def __init__(
        self,
        tokens: VoteTokenRepositoryProtocol,
        meetings: MeetingRepositoryProtocol,
        time_authority: TimeAuthorityProtocol,
        secret: str,
        default_ttl_seconds: int = DEFAULT_TTL_SECONDS,
    ) -> None:
        if not secret:
            raise ValueError("secret must not be empty")
        self._tokens = tokens
        self._meetings = meetings
        self._time = time_authority
        self._secret = secret.encode("utf-8")
        self._default_ttl = max(MIN_TTL_SECONDS, default_ttl_seconds)

    def hash_token(self, raw_token: str) -> str:
        """HMAC-SHA256 hex digest of a raw token (64 chars)."""
        return hmac.new(
            self._secret, raw_token.encode("utf-8"), hashlib.sha256
        ).hexdigest()

    async def generate(
        self,
        tenant_id: UUID,
        meeting_id: UUID | None,
        member_id: UUID | None,
        motion_id: UUID | None,
        ttl_seconds: int | None = None,
    ) -> IssuedVoteToken:
        """Issue a token bound to (meeting, member, motion).

        TTL is clamped to at least 60 seconds.

        Raises:
            InvalidRequestError: A required identifier is missing.
            MeetingNotFoundError: Meeting unknown for the tenant.
        """
        if meeting_id is None:
            raise InvalidRequestError("meeting_id")
        if member_id is None:
            raise InvalidRequestError("member_id")
        if motion_id is None:
            raise InvalidRequestError("motion_id")

        if await self._meetings.get(tenant_id, meeting_id) is None:
            raise MeetingNotFoundError(meeting_id, tenant_id)

        if ttl_seconds is None:
            ttl_seconds = self._default_ttl
        ttl = max(MIN_TTL_SECONDS, ttl_seconds)
        now = self._time.now()
        raw_token = secrets.token_hex(TOKEN_BYTES)
        token = VoteToken(
            token_hash=self.hash_token(raw_token),
            tenant_id=tenant_id,
            meeting_id=meeting_id,
            member_id=member_id,
            motion_id=motion_id,
            expires_at=now + timedelta(seconds=ttl),
            created_at=now,
        )
        await self._tokens.insert(token)

        logger.info(
            "vote_token_issued",
            tenant_id=str(tenant_id),
            meeting_id=str(meeting_id),
            motion_id=str(motion_id),
            token_hash=token.token_hash,
            ttl_seconds=ttl,
        )
        return IssuedVoteToken(
            token=raw_token, token_hash=token.token_hash, expires_at=token.expires_at
        )

    async def validate(self, raw_token: str) -> TokenValidation:
        """Diagnose a token without consuming it."""
        raw_token = raw_token.strip()
        if not raw_token:
            return TokenValidation(
                valid=False, token_hash="", reason=TokenRejection.EMPTY.value
            )

        token_hash = self.hash_token(raw_token)
        token = await self._tokens.find_by_hash(token_hash)
        if token is None:
            return TokenValidation(
                valid=False, token_hash=token_hash, reason=TokenRejection.NOT_FOUND.value
            )

        rejection = token.rejection(self._time.now())
        if rejection is not None:
            return TokenValidation(
                valid=False, token_hash=token_hash, reason=rejection.value
            )
        return _accepted(token)

    async def consume(self, raw_token: str, tenant_id: UUID | None = None) -> bool:
        """Mark a token used. Returns False when nothing was consumed.

        Without a tenant, the token's own tenant is used.
        """
        raw_token = raw_token.strip()
        if not raw_token:
            return False

        token_hash = self.hash_token(raw_token)
        if tenant_id is None:
            token = await self._tokens.find_by_hash(token_hash)
            if token is None:
                return False
            tenant_id = token.tenant_id

        consumed = await self._tokens.consume(token_hash, tenant_id, self._time.now())
        logger.info(
            "vote_token_consumed" if consumed else "vote_token_not_consumed",
            tenant_id=str(tenant_id),
            token_hash=token_hash,
        )
        return consumed

    async def validate_and_consume(self, raw_token: str) -> TokenValidation:
        """Atomically consume a valid token.

        Of several concurrent calls with the same token exactly one
        succeeds; the others fail with token_already_used.

        Raises:
            TokenEmptyError, TokenNotFoundError, TokenAlreadyUsedError,
            TokenExpiredError: The token was refused.
        """
        raw_token = raw_token.strip()
        if not raw_token:
            raise TokenEmptyError("")

        token_hash = self.hash_token(raw_token)
        now = self._time.now()
        token = await self._tokens.consume_if_valid(token_hash, now)

        if token is None:
            rejection = await self._tokens.diagnose_failure(token_hash, now)
            logger.info(
                "vote_token_rejected", token_hash=token_hash, reason=rejection.value
            )
            raise REJECTION_ERRORS[rejection.value](token_hash)

        logger.info(
            "vote_token_consumed",
            tenant_id=str(token.tenant_id),
            motion_id=str(token.motion_id),
            token_hash=token_hash,
        )
        return _accepted(token)

    async def revoke_for_motion(self, tenant_id: UUID, motion_id: UUID) -> int:
        """Invalidate every unused token of a motion. Returns the count."""
        revoked = await self._tokens.revoke_for_motion(
            tenant_id, motion_id, self._time.now()
        )
        logger.info(
            "vote_tokens_revoked",
            tenant_id=str(tenant_id),
            motion_id=str(motion_id),
            count=revoked,
        )
        return revoked


def _accepted(token: VoteToken) -> TokenValidation:
    return TokenValidation(
        valid=True,
        token_hash=token.token_hash,
        meeting_id=token.meeting_id,
        member_id=token.member_id,
        motion_id=token.motion_id,
    )
