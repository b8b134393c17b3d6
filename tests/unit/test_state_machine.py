"""
Unit Tests for the Doctor Request State Machine and Access Gate
"""
import pytest

from doctorpath.core.access import (
    ALLOWED_TRANSITIONS,
    INITIAL_STATUS,
    RequestStatus,
    TransitionOutcome,
    TransitionResult,
    can_doctor_access_patient_case,
    evaluate_transition,
    is_transition_allowed,
    validate_creation,
)

ALL_STATUSES = list(RequestStatus)


class TestTransitions:
    """Transition table."""

    def test_initial_status_is_pending(self):
        assert INITIAL_STATUS is RequestStatus.PENDING

    @pytest.mark.parametrize("target", [
        RequestStatus.ACCEPTED, RequestStatus.DECLINED, RequestStatus.RESCHEDULE,
    ])
    def test_pending_moves_forward(self, target):
        assert is_transition_allowed(RequestStatus.PENDING, target)

    def test_reschedule_can_be_repeated(self):
        assert is_transition_allowed(RequestStatus.RESCHEDULE, RequestStatus.RESCHEDULE)

    @pytest.mark.parametrize("target", [
        RequestStatus.PENDING, RequestStatus.ACCEPTED, RequestStatus.DECLINED,
    ])
    def test_reschedule_is_otherwise_closed(self, target):
        assert not is_transition_allowed(RequestStatus.RESCHEDULE, target)

    @pytest.mark.parametrize("terminal", [RequestStatus.ACCEPTED, RequestStatus.DECLINED])
    @pytest.mark.parametrize("target", ALL_STATUSES)
    def test_terminal_states(self, terminal, target):
        assert not is_transition_allowed(terminal, target)

    def test_nothing_returns_to_pending(self):
        for targets in ALLOWED_TRANSITIONS.values():
            assert RequestStatus.PENDING not in targets

    def test_accepts_plain_strings(self):
        assert is_transition_allowed("pending", "accepted")
        assert not is_transition_allowed("declined", "accepted")


class TestEvaluateTransition:
    """Checks run as NOT_FOUND, FORBIDDEN, INVALID_TRANSITION."""

    def test_applied(self, make_request_row):
        row = make_request_row(doctor_id=7, patient_id=3, status="pending")
        assert evaluate_transition(row, 7, RequestStatus.ACCEPTED) is TransitionOutcome.APPLIED

    def test_missing_request(self):
        assert evaluate_transition(None, 7, RequestStatus.ACCEPTED) is TransitionOutcome.NOT_FOUND

    def test_other_doctor_is_forbidden(self, make_request_row):
        row = make_request_row(doctor_id=7, patient_id=3, status="pending")
        assert evaluate_transition(row, 8, RequestStatus.ACCEPTED) is TransitionOutcome.FORBIDDEN

    def test_actor_without_doctor_profile_is_forbidden(self, make_request_row):
        row = make_request_row(doctor_id=7, patient_id=3, status="pending")
        assert evaluate_transition(row, None, RequestStatus.ACCEPTED) is TransitionOutcome.FORBIDDEN

    def test_forbidden_wins_over_invalid(self, make_request_row):
        """A stranger learns nothing about the request's state."""
        row = make_request_row(doctor_id=7, patient_id=3, status="declined")
        assert evaluate_transition(row, 8, RequestStatus.ACCEPTED) is TransitionOutcome.FORBIDDEN

    def test_invalid_transition(self, make_request_row):
        row = make_request_row(doctor_id=7, patient_id=3, status="accepted")
        outcome = evaluate_transition(row, 7, RequestStatus.DECLINED)
        assert outcome is TransitionOutcome.INVALID_TRANSITION

    def test_result_applied_flag(self):
        assert TransitionResult(TransitionOutcome.APPLIED).applied
        assert not TransitionResult(TransitionOutcome.FORBIDDEN).applied


class TestCreation:

    def test_patient_creates_own_request(self):
        assert validate_creation(3, 3)

    def test_patient_cannot_create_for_another(self):
        assert not validate_creation(4, 3)

    def test_non_patient_cannot_create(self):
        assert not validate_creation(None, 3)


class TestAccessGate:
    """Access requires an accepted request for the exact pair."""

    def test_accepted_request_grants_access(self, make_request_row):
        rows = [make_request_row(7, 3, "accepted")]
        assert can_doctor_access_patient_case(rows, 7, 3)

    def test_other_patient_is_not_covered(self, make_request_row):
        rows = [make_request_row(7, 3, "accepted")]
        assert not can_doctor_access_patient_case(rows, 7, 4)

    def test_other_doctor_is_not_covered(self, make_request_row):
        rows = [make_request_row(7, 3, "accepted")]
        assert not can_doctor_access_patient_case(rows, 8, 3)

    @pytest.mark.parametrize("status", ["pending", "declined", "reschedule"])
    def test_non_accepted_requests_do_not_count(self, make_request_row, status):
        rows = [make_request_row(7, 3, status)]
        assert not can_doctor_access_patient_case(rows, 7, 3)

    def test_one_accepted_among_many(self, make_request_row):
        rows = [
            make_request_row(7, 3, "declined"),
            make_request_row(7, 3, "pending"),
            make_request_row(7, 3, "accepted"),
        ]
        assert can_doctor_access_patient_case(rows, 7, 3)

    def test_no_requests(self):
        assert not can_doctor_access_patient_case([], 7, 3)
