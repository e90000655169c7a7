"""Meeting lifecycle state machine.

The transition table lives in AccessPolicy and is the one read by
PermissionChecker as well; there is no second copy to keep in sync.
"""

from __future__ import annotations

from uuid import UUID

from structlog import get_logger

from gavel.application.dtos.readiness import AvailableTransition
from gavel.application.ports.meeting_repository import MeetingRepositoryProtocol
from gavel.application.services.permission_checker import PermissionChecker
from gavel.domain.errors import (
    InvalidMeetingTransitionError,
    MeetingNotFoundError,
    MeetingStatusChangedError,
    TransitionNotPermittedError,
)
from gavel.domain.models.meeting import Meeting, MeetingStatus
from gavel.domain.models.principal import Principal

logger = get_logger(__name__)


class MeetingLifecycleService:
    """Guards and applies meeting status changes."""

    def __init__(
        self,
        meetings: MeetingRepositoryProtocol,
        permissions: PermissionChecker,
    ) -> None:
        self._meetings = meetings
        self._permissions = permissions

    def can_transition(
        self,
        principal: Principal,
        meeting: Meeting,
        to_status: MeetingStatus,
    ) -> bool:
        """Check table membership and the principal's role. No side effects."""
        return self._permissions.can_transition(
            principal, meeting.status, to_status, meeting.id
        )

    def available_transitions(
        self, principal: Principal, meeting: Meeting
    ) -> list[AvailableTransition]:
        """Transitions the principal may perform from the meeting's status."""
        return self._permissions.available_transitions(
            principal, meeting.status, meeting.id
        )

    def check_transition(
        self,
        principal: Principal,
        meeting: Meeting,
        to_status: MeetingStatus,
    ) -> None:
        """Raise if the transition is untabled or the role is insufficient.

        Raises:
            InvalidMeetingTransitionError: Transition not in the table.
            TransitionNotPermittedError: Tabled, but not for this principal.
        """
        policy = self._permissions.policy
        required = policy.required_role(meeting.status, to_status)
        if required is None:
            raise InvalidMeetingTransitionError(
                meeting.status,
                to_status,
                list(policy.targets(meeting.status)),
            )
        if not self.can_transition(principal, meeting, to_status):
            raise TransitionNotPermittedError(
                meeting.status, to_status, required, principal.role
            )

    async def transition(
        self,
        principal: Principal,
        tenant_id: UUID,
        meeting_id: UUID,
        to_status: MeetingStatus,
    ) -> Meeting:
        """Load a meeting, check the transition and persist the new status.

        Raises:
            MeetingNotFoundError: No such meeting for the tenant.
            InvalidMeetingTransitionError: Transition not in the table.
            TransitionNotPermittedError: Principal lacks the required role.
            MeetingStatusChangedError: Another transition landed first.
        """
        log = logger.bind(
            tenant_id=str(tenant_id),
            meeting_id=str(meeting_id),
            to_status=to_status.value,
            role=principal.role.value,
        )

        meeting = await self._meetings.get(tenant_id, meeting_id)
        if meeting is None:
            raise MeetingNotFoundError(meeting_id, tenant_id)

        try:
            self.check_transition(principal, meeting, to_status)
        except (InvalidMeetingTransitionError, TransitionNotPermittedError) as exc:
            log.warning(
                "meeting_transition_rejected",
                from_status=meeting.status.value,
                code=exc.code,
            )
            raise

        updated = meeting.with_status(to_status)
        if not await self._meetings.save_if_status(updated, meeting.status):
            current = await self._meetings.get(tenant_id, meeting_id)
            current_status = current.status if current is not None else None
            log.warning(
                "meeting_transition_lost_race",
                from_status=meeting.status.value,
                current_status=current_status.value if current_status else None,
            )
            raise MeetingStatusChangedError(meeting.status, to_status, current_status)

        log.info("meeting_transitioned", from_status=meeting.status.value)
        return updated
