"""Motion tallying, majority evaluation and the final decision.

Decision priority (first match wins):
1. no ballot at all                     -> no_votes
2. quorum applied and not met           -> no_quorum
3. vote policy present, majority met    -> adopted
4. vote policy present, majority unmet  -> rejected
5. no vote policy                       -> no_policy
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from gavel.application.dtos.motion_result import (
    Decision,
    MajorityResult,
    MotionResult,
    Tally,
    TallyBucket,
)
from gavel.application.dtos.quorum import EligibleSummary, QuorumResult
from gavel.application.services.quorum_engine import QuorumEngine, count_participation
from gavel.domain.models.attendance import AttendanceMode, AttendanceRecord
from gavel.domain.models.ballot import Ballot, BallotValue
from gavel.domain.models.member import EligibleBase, Participation
from gavel.domain.models.motion import DecisionStatus, Motion
from gavel.domain.models.policy import QuorumPolicy, VoteBase, VotePolicy

DECISION_REASONS: dict[DecisionStatus, str] = {
    DecisionStatus.NO_VOTES: "Aucun bulletin enregistré pour cette motion.",
    DecisionStatus.NO_QUORUM: "Quorum non atteint.",
    DecisionStatus.ADOPTED: "Seuil de majorité atteint.",
    DecisionStatus.REJECTED: "Seuil de majorité non atteint.",
    DecisionStatus.NO_POLICY: "Aucune politique de vote définie pour cette motion.",
}

# Order in which present+remote attendance is listed for display
_PRESENT_MODES: tuple[AttendanceMode, ...] = (
    AttendanceMode.PRESENT,
    AttendanceMode.REMOTE,
)


def tally_ballots(ballots: Iterable[Ballot]) -> Tally:
    """Group current ballots by value; superseded ballots are ignored."""
    counts = {value: 0 for value in BallotValue}
    weights = {value: 0.0 for value in BallotValue}
    for ballot in ballots:
        if not ballot.is_current:
            continue
        counts[ballot.value] += 1
        weights[ballot.value] += ballot.weight

    expressed = [v for v in BallotValue if v.is_expressed]
    return Tally(
        for_=TallyBucket(count=counts[BallotValue.FOR], weight=weights[BallotValue.FOR]),
        against=TallyBucket(
            count=counts[BallotValue.AGAINST], weight=weights[BallotValue.AGAINST]
        ),
        abstain=TallyBucket(
            count=counts[BallotValue.ABSTAIN], weight=weights[BallotValue.ABSTAIN]
        ),
        nsp=TallyBucket(count=counts[BallotValue.NSP], weight=weights[BallotValue.NSP]),
        expressed=TallyBucket(
            count=sum(counts[v] for v in expressed),
            weight=sum(weights[v] for v in expressed),
        ),
    )


class VoteEngine:
    """Turns ballots, attendance and policies into a motion result."""

    def __init__(self, quorum_engine: QuorumEngine | None = None) -> None:
        self._quorum = quorum_engine or QuorumEngine()

    def compute_motion_result(
        self,
        motion: Motion,
        ballots: Sequence[Ballot],
        eligible: EligibleBase,
        vote_policy: VotePolicy | None,
        quorum_policy: QuorumPolicy | None,
        *,
        convocation_no: int = 1,
        attendance: Sequence[AttendanceRecord] | None = None,
        present_weight: float | None = None,
    ) -> MotionResult:
        """Compute the full result of a motion.

        Args:
            motion: The motion; opened_at drives the late-arrival rule.
            ballots: Ballots cast on the motion.
            eligible: Eligible members and weight.
            vote_policy: Majority rule, None when not configured.
            quorum_policy: Quorum rule, None when not configured.
            convocation_no: Convocation of the parent meeting.
            attendance: Meeting roster; when omitted the quorum numerator
                is the expressed ballots.
            present_weight: Base for the ``present`` majority rule; derived
                from attendance when omitted, else falls back to expressed.

        Returns:
            The motion result.
        """
        tally = tally_ballots(ballots)
        quorum = self._compute_quorum(
            motion, tally, eligible, quorum_policy, convocation_no, attendance
        )

        if present_weight is None and attendance is not None:
            present_weight = count_participation(attendance, _PRESENT_MODES).weight

        majority = self.compute_majority(tally, eligible, vote_policy, present_weight)
        status = self.decide(tally, quorum, majority)

        return MotionResult(
            motion_id=motion.id,
            meeting_id=motion.meeting_id,
            vote_policy_id=vote_policy.id if vote_policy else None,
            quorum_policy_id=quorum_policy.id if quorum_policy else None,
            tally=tally,
            eligible=EligibleSummary(members=eligible.members, weight=eligible.weight),
            quorum=quorum,
            majority=majority,
            decision=Decision(status=status, reason=DECISION_REASONS[status]),
        )

    def compute_majority(
        self,
        tally: Tally,
        eligible: EligibleBase,
        policy: VotePolicy | None,
        present_weight: float | None = None,
    ) -> MajorityResult:
        """Evaluate the majority rule.

        The "for" ratio is for.weight over the base. abstention_as_against
        only changes the displayed against figures.
        """
        if policy is None:
            return MajorityResult(applied=False)

        if policy.base is VoteBase.ELIGIBLE:
            base_weight = eligible.weight
        elif policy.base is VoteBase.PRESENT:
            base_weight = (
                present_weight if present_weight is not None else tally.expressed.weight
            )
        else:
            base_weight = tally.expressed.weight

        if base_weight <= 0.0 or tally.expressed.weight <= 0.0:
            ratio = 0.0
            met = False
        else:
            ratio = tally.for_.weight / base_weight
            met = ratio >= policy.threshold

        against_count = tally.against.count
        against_weight = tally.against.weight
        if policy.abstention_as_against:
            against_count += tally.abstain.count
            against_weight += tally.abstain.weight

        return MajorityResult(
            applied=True,
            base=policy.base,
            base_weight=max(0.0, base_weight),
            ratio=ratio,
            threshold=policy.threshold,
            met=met,
            abstention_as_against=policy.abstention_as_against,
            against_display_count=against_count,
            against_display_weight=against_weight,
        )

    @staticmethod
    def decide(
        tally: Tally, quorum: QuorumResult, majority: MajorityResult
    ) -> DecisionStatus:
        """Apply the decision priority order."""
        if tally.total_ballots == 0:
            return DecisionStatus.NO_VOTES
        if quorum.applied and quorum.met is False:
            return DecisionStatus.NO_QUORUM
        if majority.applied:
            return DecisionStatus.ADOPTED if majority.met else DecisionStatus.REJECTED
        return DecisionStatus.NO_POLICY

    def _compute_quorum(
        self,
        motion: Motion,
        tally: Tally,
        eligible: EligibleBase,
        policy: QuorumPolicy | None,
        convocation_no: int,
        attendance: Sequence[AttendanceRecord] | None,
    ) -> QuorumResult:
        if policy is None:
            return self._quorum.no_policy()

        modes = policy.counted_modes()
        if attendance is not None:
            participation = count_participation(attendance, modes, motion.opened_at)
            late_cutoff = motion.opened_at
        else:
            participation = Participation(
                members=tally.expressed.count, weight=tally.expressed.weight
            )
            late_cutoff = None

        return self._quorum.compute_for_participation(
            policy,
            convocation_no,
            participation,
            eligible,
            modes,
            late_cutoff=late_cutoff,
        )
