"""
Doctor/patient connection requests and the access gate derived from them.
"""
from .gate import can_doctor_access_patient_case
from .state_machine import (
    ALLOWED_TRANSITIONS,
    INITIAL_STATUS,
    RequestStatus,
    TransitionOutcome,
    TransitionResult,
    evaluate_transition,
    is_transition_allowed,
    validate_creation,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "INITIAL_STATUS",
    "RequestStatus",
    "TransitionOutcome",
    "TransitionResult",
    "can_doctor_access_patient_case",
    "evaluate_transition",
    "is_transition_allowed",
    "validate_creation",
]
