"""
Doctor Request State Machine

A doctor request is created `pending` by a patient and moved on by the
doctor it is addressed to:

    pending    → accepted | declined | reschedule
    reschedule → reschedule        (doctor proposes another slot)

`accepted` and `declined` are terminal. Nothing moves back to `pending`;
a patient who wants to answer a reschedule files a new request.

The functions here only decide. Persisting an applied transition is the
storage layer's job (see Storage.transition_doctor_request).
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional


class RequestStatus(str, Enum):
    PENDING    = "pending"
    ACCEPTED   = "accepted"
    DECLINED   = "declined"
    RESCHEDULE = "reschedule"


class TransitionOutcome(str, Enum):
    """
    Result of a transition attempt. These are values, not exceptions;
    the HTTP layer maps them to status codes.
    """
    APPLIED            = "applied"
    NOT_FOUND          = "not_found"
    FORBIDDEN          = "forbidden"
    INVALID_TRANSITION = "invalid_transition"


ALLOWED_TRANSITIONS: Dict[RequestStatus, FrozenSet[RequestStatus]] = {
    RequestStatus.PENDING: frozenset({
        RequestStatus.ACCEPTED,
        RequestStatus.DECLINED,
        RequestStatus.RESCHEDULE,
    }),
    RequestStatus.RESCHEDULE: frozenset({RequestStatus.RESCHEDULE}),
}

INITIAL_STATUS = RequestStatus.PENDING


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of a transition plus the request row as it now stands."""
    outcome: TransitionOutcome
    request: Optional[Any] = None

    @property
    def applied(self) -> bool:
        return self.outcome is TransitionOutcome.APPLIED


def is_transition_allowed(current: RequestStatus, target: RequestStatus) -> bool:
    return RequestStatus(target) in ALLOWED_TRANSITIONS.get(RequestStatus(current), frozenset())


def evaluate_transition(
    request: Optional[Any],
    actor_doctor_id: Optional[int],
    target: RequestStatus,
) -> TransitionOutcome:
    """
    Decide whether `actor_doctor_id` may move `request` to `target`.

    Args:
        request: Any object with `doctor_id` and `status` attributes
                 (normally a DoctorRequest row), or None when the id
                 did not resolve.
        actor_doctor_id: Doctor id of the caller.
        target: Requested status.

    Returns:
        NOT_FOUND, FORBIDDEN, INVALID_TRANSITION or APPLIED, checked in
        that order.
    """
    if request is None:
        return TransitionOutcome.NOT_FOUND
    if actor_doctor_id is None or request.doctor_id != actor_doctor_id:
        return TransitionOutcome.FORBIDDEN
    if not is_transition_allowed(request.status, target):
        return TransitionOutcome.INVALID_TRANSITION
    return TransitionOutcome.APPLIED


def validate_creation(actor_patient_id: Optional[int], patient_id: int) -> bool:
    """Only the patient named on a request may create it."""
    return actor_patient_id is not None and actor_patient_id == patient_id
