"""Unit tests for QuorumEngine.

Covers:
- Division-by-zero guards on both bases
- No policy means applied=False, met=None
- Inclusive thresholds and the second-convocation threshold
- All four double-quorum combinations
- Late-arrival exclusion and the byte-stable justification
"""

from datetime import datetime, timedelta, timezone

import pytest
from structlog.testing import capture_logs
from uuid6 import uuid7

from gavel.application.services.quorum_engine import (
    LATE_RULE_SUFFIX,
    NO_POLICY_JUSTIFICATION,
    QuorumEngine,
    count_participation,
)
from gavel.domain.models.attendance import AttendanceMode, AttendanceRecord
from gavel.domain.models.meeting import Meeting
from gavel.domain.models.member import EligibleBase, Participation
from gavel.domain.models.policy import QuorumBasis, QuorumMode, QuorumPolicy

OPENED_AT = datetime(2026, 3, 1, 18, 30, tzinfo=timezone.utc)


@pytest.fixture
def engine() -> QuorumEngine:
    """Quorum engine with the default weight floor."""
    return QuorumEngine()


def _meeting(convocation_no: int = 1) -> Meeting:
    return Meeting(id=uuid7(), tenant_id=uuid7(), convocation_no=convocation_no)


def _present(count: int, power: float = 1.0) -> list[AttendanceRecord]:
    return [
        AttendanceRecord(member_id=uuid7(), mode=AttendanceMode.PRESENT, voting_power=power)
        for _ in range(count)
    ]


def _absent(count: int, power: float = 1.0) -> list[AttendanceRecord]:
    return [
        AttendanceRecord(member_id=uuid7(), mode=AttendanceMode.ABSENT, voting_power=power)
        for _ in range(count)
    ]


def _policy(**overrides: object) -> QuorumPolicy:
    values: dict[str, object] = {"id": uuid7(), "name": "Quorum statutaire"}
    values.update(overrides)
    return QuorumPolicy(**values)  # type: ignore[arg-type]


# =============================================================================
# Ratio blocks
# =============================================================================


class TestRatioBlock:
    """Single (basis, threshold) evaluation."""

    def test_zero_eligible_members_never_divides_by_zero(
        self, engine: QuorumEngine
    ) -> None:
        """The member denominator is at least 1."""
        block = engine.ratio_block(
            QuorumBasis.ELIGIBLE_MEMBERS,
            0.5,
            Participation(members=0, weight=0.0),
            EligibleBase(members=0, weight=0.0),
        )
        assert block.denominator == 1.0
        assert block.ratio == 0.0
        assert block.met is False

    def test_zero_eligible_weight_uses_floor(self, engine: QuorumEngine) -> None:
        """Any counted weight over a zero eligible weight clears the bar."""
        block = engine.ratio_block(
            QuorumBasis.ELIGIBLE_WEIGHT,
            1.0,
            Participation(members=1, weight=1.0),
            EligibleBase(members=1, weight=0.0),
        )
        assert block.denominator == pytest.approx(0.0001)
        assert block.ratio == pytest.approx(10_000.0)
        assert block.met is True

    def test_floor_with_counted_weight_is_logged(self, engine: QuorumEngine) -> None:
        """Counted weight over a zero eligible weight is flagged as a data issue."""
        with capture_logs() as logs:
            engine.ratio_block(
                QuorumBasis.ELIGIBLE_WEIGHT,
                0.5,
                Participation(members=2, weight=3.0),
                EligibleBase(members=2, weight=0.0),
            )
        assert [entry["event"] for entry in logs] == ["quorum_weight_floor_applied"]
        assert logs[0]["log_level"] == "warning"

    def test_zero_threshold_met_with_nobody(self, engine: QuorumEngine) -> None:
        """A threshold of zero is met by an empty room."""
        block = engine.ratio_block(
            QuorumBasis.ELIGIBLE_WEIGHT,
            0.0,
            Participation(members=0, weight=0.0),
            EligibleBase(members=0, weight=0.0),
        )
        assert block.ratio == 0.0
        assert block.met is True

    def test_exact_threshold_is_met(self, engine: QuorumEngine) -> None:
        """50 of 100 at threshold 0.5 is met."""
        block = engine.ratio_block(
            QuorumBasis.ELIGIBLE_MEMBERS,
            0.5,
            Participation(members=50, weight=50.0),
            EligibleBase(members=100, weight=100.0),
        )
        assert block.ratio == 0.5
        assert block.met is True

    def test_custom_floor(self) -> None:
        """The weight floor is configurable."""
        engine = QuorumEngine(weight_floor=1.0)
        block = engine.ratio_block(
            QuorumBasis.ELIGIBLE_WEIGHT,
            0.5,
            Participation(members=1, weight=0.25),
            EligibleBase(members=1, weight=0.0),
        )
        assert block.ratio == 0.25
        assert block.met is False

    def test_floor_must_be_positive(self) -> None:
        """A zero floor would reintroduce division by zero."""
        with pytest.raises(ValueError):
            QuorumEngine(weight_floor=0.0)


# =============================================================================
# compute_for_meeting
# =============================================================================


class TestComputeForMeeting:
    """Meeting-level quorum verdicts."""

    def test_no_policy(self, engine: QuorumEngine) -> None:
        """Absence of a policy never blocks."""
        result = engine.compute_for_meeting(_meeting(), None, _present(3))

        assert result.applied is False
        assert result.met is None
        assert result.details is None
        assert result.justification == NO_POLICY_JUSTIFICATION

    def test_empty_roster_is_finite(self, engine: QuorumEngine) -> None:
        """Nobody eligible and nobody present still yields a verdict."""
        result = engine.compute_for_meeting(_meeting(), _policy(), [])

        assert result.applied is True
        assert result.met is False
        assert result.details is not None
        assert result.details.primary.ratio == 0.0

    def test_boundary_inclusive(self, engine: QuorumEngine) -> None:
        """50 present of 100 eligible at 0.5 is met."""
        attendance = _present(50) + _absent(50)
        result = engine.compute_for_meeting(_meeting(), _policy(threshold_1=0.5), attendance)

        assert result.met is True
        assert result.details is not None
        assert result.details.numerator.members == 50
        assert result.details.eligible.members == 100

    def test_eligible_override(self, engine: QuorumEngine) -> None:
        """An explicit eligible base wins over the roster size."""
        result = engine.compute_for_meeting(
            _meeting(),
            _policy(threshold_1=0.5),
            _present(40),
            eligible=EligibleBase(members=100, weight=100.0),
        )
        assert result.met is False
        assert result.details is not None
        assert result.details.primary.ratio == pytest.approx(0.4)

    def test_second_convocation_threshold(self, engine: QuorumEngine) -> None:
        """A reduced bar applies on the second calling."""
        policy = _policy(threshold_1=0.5, threshold_2=0.25)
        attendance = _present(30) + _absent(70)

        first = engine.compute_for_meeting(_meeting(1), policy, attendance)
        second = engine.compute_for_meeting(_meeting(2), policy, attendance)

        assert first.met is False
        assert second.met is True
        assert second.details is not None
        assert second.details.primary.threshold == 0.25

    def test_second_convocation_without_threshold_2(self, engine: QuorumEngine) -> None:
        """Without threshold_2 the first threshold still applies."""
        policy = _policy(threshold_1=0.5)
        result = engine.compute_for_meeting(_meeting(2), policy, _present(30) + _absent(70))

        assert result.met is False
        assert result.details is not None
        assert result.details.primary.threshold == 0.5

    def test_remote_and_proxy_toggles(self, engine: QuorumEngine) -> None:
        """Remote and proxy attendance only count when the policy says so."""
        attendance = [
            AttendanceRecord(member_id=uuid7(), mode=AttendanceMode.PRESENT),
            AttendanceRecord(member_id=uuid7(), mode=AttendanceMode.REMOTE),
            AttendanceRecord(member_id=uuid7(), mode=AttendanceMode.PROXY),
            AttendanceRecord(member_id=uuid7(), mode=AttendanceMode.EXCUSED),
        ]
        strict = _policy(count_remote=False, include_proxies=False)
        lenient = _policy()

        strict_result = engine.compute_for_meeting(_meeting(), strict, attendance)
        lenient_result = engine.compute_for_meeting(_meeting(), lenient, attendance)

        assert strict_result.details is not None
        assert strict_result.details.numerator.members == 1
        assert lenient_result.details is not None
        assert lenient_result.details.numerator.members == 3

    def test_weighted_basis(self, engine: QuorumEngine) -> None:
        """eligible_weight sums voting power."""
        attendance = _present(2, power=30.0) + _absent(4, power=10.0)
        policy = _policy(basis=QuorumBasis.ELIGIBLE_WEIGHT, threshold_1=0.6)

        result = engine.compute_for_meeting(_meeting(), policy, attendance)

        assert result.details is not None
        assert result.details.primary.numerator == 60.0
        assert result.details.primary.denominator == 100.0
        assert result.met is True

    def test_late_arrivals_excluded(self, engine: QuorumEngine) -> None:
        """Members who arrived after the motion opened are not counted."""
        on_time = AttendanceRecord(
            member_id=uuid7(),
            mode=AttendanceMode.PRESENT,
            present_from_at=OPENED_AT - timedelta(minutes=10),
        )
        late = AttendanceRecord(
            member_id=uuid7(),
            mode=AttendanceMode.PRESENT,
            present_from_at=OPENED_AT + timedelta(minutes=10),
        )
        result = engine.compute_for_meeting(
            _meeting(), _policy(), [on_time, late], late_cutoff=OPENED_AT
        )

        assert result.details is not None
        assert result.details.numerator.members == 1
        assert result.details.late_rule.enabled is True
        assert result.details.late_rule.motion_opened_at == OPENED_AT
        assert result.justification.endswith(LATE_RULE_SUFFIX)


# =============================================================================
# Double quorum
# =============================================================================


class TestDoubleQuorum:
    """Two independent conditions must both hold."""

    @pytest.mark.parametrize(
        ("members_threshold", "weight_threshold", "expected"),
        [
            (0.5, 0.5, True),
            (0.5, 0.9, False),
            (0.9, 0.5, False),
            (0.9, 0.9, False),
        ],
    )
    def test_all_combinations(
        self,
        engine: QuorumEngine,
        members_threshold: float,
        weight_threshold: float,
        expected: bool,
    ) -> None:
        """Overall met is primary.met and secondary.met."""
        # 6 of 10 members present, carrying 60 of 100 weight
        attendance = _present(6, power=10.0) + _absent(4, power=10.0)
        policy = _policy(
            mode=QuorumMode.DOUBLE,
            basis=QuorumBasis.ELIGIBLE_MEMBERS,
            threshold_1=members_threshold,
            secondary_basis=QuorumBasis.ELIGIBLE_WEIGHT,
            secondary_threshold=weight_threshold,
        )

        result = engine.compute_for_meeting(_meeting(), policy, attendance)

        assert result.details is not None
        assert result.details.primary.met is (members_threshold == 0.5)
        assert result.details.secondary is not None
        assert result.details.secondary.met is (weight_threshold == 0.5)
        assert result.met is expected

    def test_missing_secondary_is_not_met(self, engine: QuorumEngine) -> None:
        """Double mode without a second condition cannot be satisfied."""
        policy = _policy(mode=QuorumMode.DOUBLE, threshold_1=0.1)

        result = engine.compute_for_meeting(_meeting(), policy, _present(10))

        assert result.met is False
        assert result.details is not None
        assert result.details.primary.met is True
        assert result.details.secondary is not None
        assert result.details.secondary.configured is False
        assert "Condition 2 : non configurée." in result.justification

    def test_single_mode_has_no_secondary(self, engine: QuorumEngine) -> None:
        """Secondary settings are ignored in single mode."""
        policy = _policy(
            secondary_basis=QuorumBasis.ELIGIBLE_WEIGHT, secondary_threshold=0.99
        )
        result = engine.compute_for_meeting(_meeting(), policy, _present(10))

        assert result.met is True
        assert result.details is not None
        assert result.details.secondary is None


# =============================================================================
# Justification
# =============================================================================


class TestJustification:
    """Audit-trail sentence."""

    def test_exact_text(self, engine: QuorumEngine) -> None:
        """The sentence is fixed for a given input."""
        result = engine.compute_for_meeting(
            _meeting(), _policy(threshold_1=0.5), _present(50) + _absent(50)
        )
        assert result.justification == (
            "Quorum statutaire (convocation 1) : base eligible_members "
            "(ratio 0.5000 / seuil 0.5000). Comptés: present, remote, proxy. "
            "Résultat: atteint."
        )

    def test_not_met_text_with_secondary(self, engine: QuorumEngine) -> None:
        """Double-mode verdicts append the second condition."""
        policy = _policy(
            mode=QuorumMode.DOUBLE,
            threshold_1=0.5,
            count_remote=False,
            include_proxies=False,
            secondary_basis=QuorumBasis.ELIGIBLE_WEIGHT,
            secondary_threshold=0.75,
        )
        result = engine.compute_for_meeting(
            _meeting(2), policy, _present(6) + _absent(4)
        )
        assert result.justification == (
            "Quorum statutaire (convocation 2) : base eligible_members "
            "(ratio 0.6000 / seuil 0.5000). Comptés: present. "
            "Résultat: non atteint. "
            "Condition 2 : base eligible_weight (ratio 0.6000 / seuil 0.7500)."
        )

    def test_secondary_only_extends_primary_sentence(self, engine: QuorumEngine) -> None:
        """Switching a policy to double mode leaves the primary sentence byte-identical."""
        attendance = _present(6) + _absent(4)
        single = engine.compute_for_meeting(
            _meeting(), _policy(threshold_1=0.5), attendance
        )
        double = engine.compute_for_meeting(
            _meeting(),
            _policy(
                mode=QuorumMode.DOUBLE,
                threshold_1=0.5,
                secondary_basis=QuorumBasis.ELIGIBLE_WEIGHT,
                secondary_threshold=0.5,
            ),
            attendance,
        )

        assert double.justification.startswith(single.justification)
        assert double.justification[len(single.justification):].startswith(" Condition 2 : ")

    def test_reproducible(self, engine: QuorumEngine) -> None:
        """Identical inputs give byte-identical text."""
        policy = _policy()
        attendance = _present(7) + _absent(3)
        meeting = _meeting()

        first = engine.compute_for_meeting(meeting, policy, attendance)
        second = engine.compute_for_meeting(meeting, policy, attendance)

        assert first.justification.encode() == second.justification.encode()


def test_count_participation_sums_power() -> None:
    """Members and power are summed over counted records only."""
    attendance = _present(2, power=2.5) + _absent(3, power=4.0)
    participation = count_participation(attendance, (AttendanceMode.PRESENT,))
    assert participation == Participation(members=2, weight=5.0)
