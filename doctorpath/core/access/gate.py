"""
Access gate for doctor reads of patient data.

A doctor may see a patient's profile, cases, files and history once at
least one of the pair's requests has been accepted. Access does not
expire and is not tied to a particular case.
"""
from __future__ import annotations

from typing import Any, Iterable

from .state_machine import RequestStatus


def can_doctor_access_patient_case(
    requests: Iterable[Any],
    doctor_id: int,
    patient_id: int,
) -> bool:
    """
    True iff some request between `doctor_id` and `patient_id` is accepted.

    `requests` may contain rows for other pairs; they are ignored.
    """
    return any(
        r.doctor_id == doctor_id
        and r.patient_id == patient_id
        and r.status == RequestStatus.ACCEPTED
        for r in requests
    )
