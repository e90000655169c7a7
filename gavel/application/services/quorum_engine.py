"""Quorum computation.

Numerator: members (and their voting power) whose attendance mode is
counted by the policy: present always, remote if count_remote, proxy if
include_proxies. Checked-out members never count; when a motion opening
time is given, members who arrived after it do not count either.

Denominator: the eligible base. For eligible_members it is max(1, n) so
an empty roster never divides by zero. For eligible_weight it is the
eligible weight, or a small positive floor when that weight is zero.
The floor keeps the ratio finite; with any counted weight it makes the
ratio exceed every realistic threshold.

Thresholds are inclusive: ratio == threshold is met.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from structlog import get_logger

from gavel.application.dtos.quorum import (
    EligibleSummary,
    LateRule,
    QuorumBlock,
    QuorumDetails,
    QuorumNumerator,
    QuorumResult,
)
from gavel.domain.models.attendance import AttendanceMode, AttendanceRecord
from gavel.domain.models.meeting import Meeting
from gavel.domain.models.member import EligibleBase, Participation
from gavel.domain.models.policy import QuorumBasis, QuorumMode, QuorumPolicy

NO_POLICY_JUSTIFICATION = "Aucune politique de quorum appliquée."
LATE_RULE_SUFFIX = " Retardataires exclus (present_from_at > opened_at)."
SECONDARY_MISSING_SEGMENT = " Condition 2 : non configurée."

DEFAULT_WEIGHT_FLOOR = 0.0001

logger = get_logger(__name__)


def count_participation(
    attendance: Iterable[AttendanceRecord],
    modes: Sequence[AttendanceMode],
    late_cutoff: datetime | None = None,
) -> Participation:
    """Count members and sum voting power over the counted records."""
    members = 0
    weight = 0.0
    for record in attendance:
        if record.is_counted(modes, late_cutoff):
            members += 1
            weight += record.voting_power
    return Participation(members=members, weight=weight)


class QuorumEngine:
    """Pure quorum arithmetic; no repository access."""

    def __init__(self, weight_floor: float = DEFAULT_WEIGHT_FLOOR) -> None:
        if weight_floor <= 0:
            raise ValueError(f"weight_floor must be positive, got {weight_floor}")
        self._weight_floor = weight_floor

    def ratio_block(
        self,
        basis: QuorumBasis,
        threshold: float,
        participation: Participation,
        eligible: EligibleBase,
    ) -> QuorumBlock:
        """Evaluate one (basis, threshold) pair."""
        if basis is QuorumBasis.ELIGIBLE_MEMBERS:
            numerator = float(participation.members)
            denominator = float(max(1, eligible.members))
        else:
            numerator = participation.weight
            if eligible.weight > 0:
                denominator = eligible.weight
            else:
                denominator = self._weight_floor
                if numerator > 0:
                    logger.warning(
                        "quorum_weight_floor_applied",
                        counted_weight=numerator,
                        floor=self._weight_floor,
                    )

        ratio = numerator / denominator
        return QuorumBlock(
            configured=True,
            basis=basis,
            ratio=ratio,
            threshold=threshold,
            numerator=numerator,
            denominator=denominator,
            met=ratio >= threshold,
        )

    def compute_for_meeting(
        self,
        meeting: Meeting,
        policy: QuorumPolicy | None,
        attendance: Sequence[AttendanceRecord],
        *,
        eligible: EligibleBase | None = None,
        late_cutoff: datetime | None = None,
    ) -> QuorumResult:
        """Compute the quorum verdict for a meeting (or a motion within it).

        Args:
            meeting: Supplies the convocation number.
            policy: Quorum policy, None when not configured.
            attendance: Attendance roster of the meeting.
            eligible: Eligible base; derived from the roster when omitted.
            late_cutoff: Motion opening time for the late-arrival rule.

        Returns:
            The quorum result; applied=False and met=None without a policy.
        """
        if policy is None:
            return self.no_policy()

        if eligible is None:
            eligible = EligibleBase(
                members=len(attendance),
                weight=sum(record.voting_power for record in attendance),
            )

        modes = policy.counted_modes()
        participation = count_participation(attendance, modes, late_cutoff)
        return self.compute_for_participation(
            policy,
            meeting.convocation_no,
            participation,
            eligible,
            modes,
            late_cutoff=late_cutoff,
        )

    def compute_for_participation(
        self,
        policy: QuorumPolicy,
        convocation_no: int,
        participation: Participation,
        eligible: EligibleBase,
        counted_modes: Sequence[AttendanceMode],
        *,
        late_cutoff: datetime | None = None,
    ) -> QuorumResult:
        """Compute the verdict from an already-counted numerator."""
        primary = self.ratio_block(
            policy.basis,
            policy.primary_threshold(convocation_no),
            participation,
            eligible,
        )
        met = primary.met
        secondary: QuorumBlock | None = None

        if policy.mode is QuorumMode.DOUBLE:
            if (
                policy.secondary_basis is not None
                and policy.secondary_threshold is not None
            ):
                secondary = self.ratio_block(
                    policy.secondary_basis,
                    policy.secondary_threshold,
                    participation,
                    eligible,
                )
                met = primary.met and secondary.met
            else:
                secondary = QuorumBlock(configured=False, met=False)
                met = False

        mode_labels = tuple(mode.value for mode in counted_modes)
        details = QuorumDetails(
            policy_id=policy.id,
            policy_name=policy.name,
            mode=policy.mode,
            convocation_no=convocation_no,
            primary=primary,
            secondary=secondary,
            numerator=QuorumNumerator(
                members=participation.members,
                weight=participation.weight,
                modes=mode_labels,
            ),
            eligible=EligibleSummary(members=eligible.members, weight=eligible.weight),
            late_rule=LateRule(
                enabled=late_cutoff is not None, motion_opened_at=late_cutoff
            ),
        )
        return QuorumResult(
            applied=True,
            met=met,
            justification=self.justification(details, met),
            details=details,
        )

    @staticmethod
    def no_policy() -> QuorumResult:
        """Result used when no quorum policy is configured."""
        return QuorumResult(
            applied=False, met=None, justification=NO_POLICY_JUSTIFICATION
        )

    @staticmethod
    def justification(details: QuorumDetails, met: bool) -> str:
        """Audit-trail sentence, stable for identical inputs.

        The primary sentence is the historical audit format. Double-mode
        policies append a "Condition 2" segment after it (the historical
        format only described the primary block), so the secondary verdict
        is auditable too. The segment never alters the primary text, and
        single-mode strings are unchanged.
        """
        primary = details.primary
        text = (
            f"{details.policy_name} (convocation {details.convocation_no}) : "
            f"base {_basis_label(primary)} "
            f"(ratio {primary.ratio:.4f} / seuil {primary.threshold:.4f}). "
            f"Comptés: {', '.join(details.numerator.modes)}. "
            f"Résultat: {'atteint' if met else 'non atteint'}."
        )
        secondary = details.secondary
        if secondary is not None:
            if secondary.configured:
                text += (
                    f" Condition 2 : base {_basis_label(secondary)} "
                    f"(ratio {secondary.ratio:.4f} / seuil {secondary.threshold:.4f})."
                )
            else:
                text += SECONDARY_MISSING_SEGMENT
        if details.late_rule.enabled:
            text += LATE_RULE_SUFFIX
        return text


def _basis_label(block: QuorumBlock) -> str:
    return block.basis.value if block.basis is not None else ""
