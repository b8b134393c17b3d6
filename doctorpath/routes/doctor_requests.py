"""
Doctor request endpoints.

Patients create requests; the addressed doctor moves them through the
state machine. Transition outcomes map to 404 / 403 / 409.
"""
from typing import List

from fastapi import APIRouter, Depends, status

from doctorpath.core.access import TransitionOutcome, validate_creation
from doctorpath.db import Storage
from doctorpath.models.requests import (
    DoctorRequestCreate,
    DoctorRequestEnvelope,
    DoctorRequestOut,
    DoctorRequestUpdate,
)
from doctorpath.services.auth import Identity
from doctorpath.utils import (
    ConflictError,
    InvalidRequestError,
    NotFoundError,
    PermissionDeniedError,
    get_logger,
)
from .deps import get_storage, require_doctor, require_patient
from .serializers import request_out

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Doctor Requests"])


@router.get("/patient/requests", response_model=List[DoctorRequestOut])
def list_patient_requests(
    identity: Identity = Depends(require_patient),
    storage: Storage = Depends(get_storage),
):
    return [
        request_out(r, enrich=True)
        for r in storage.get_doctor_requests_by_patient(identity.patient_id)
    ]


@router.get("/doctor/requests", response_model=List[DoctorRequestOut])
def list_doctor_requests(
    identity: Identity = Depends(require_doctor),
    storage: Storage = Depends(get_storage),
):
    return [
        request_out(r, enrich=True)
        for r in storage.get_doctor_requests_by_doctor(identity.doctor_id)
    ]


@router.post("/doctor-requests", response_model=DoctorRequestEnvelope, status_code=status.HTTP_201_CREATED)
def create_doctor_request(
    body: DoctorRequestCreate,
    identity: Identity = Depends(require_patient),
    storage: Storage = Depends(get_storage),
):
    patient_id = body.patient_id if body.patient_id is not None else identity.patient_id
    if not validate_creation(identity.patient_id, patient_id):
        raise PermissionDeniedError("Patients can only create requests for themselves")

    if storage.get_doctor_by_id(body.doctor_id) is None:
        raise NotFoundError("Doctor not found", resource="doctor")
    if body.hospital_id is not None and storage.get_hospital_by_id(body.hospital_id) is None:
        raise InvalidRequestError("Unknown hospital", details={"hospital_id": body.hospital_id})

    data_share = body.data_share.model_dump() if body.data_share else None
    if data_share and data_share.get("file_id") is not None:
        shared = storage.get_medical_file_by_id(data_share["file_id"])
        if shared is None or shared.patient_id != patient_id:
            raise PermissionDeniedError("Cannot share this file")

    request = storage.create_doctor_request(
        patient_id=patient_id,
        doctor_id=body.doctor_id,
        hospital_id=body.hospital_id,
        note=body.note,
        data_share=data_share,
    )
    return DoctorRequestEnvelope(request=request_out(request))


@router.patch("/doctor-requests/{request_id}", response_model=DoctorRequestEnvelope)
def update_doctor_request(
    request_id: int,
    body: DoctorRequestUpdate,
    identity: Identity = Depends(require_doctor),
    storage: Storage = Depends(get_storage),
):
    result = storage.transition_doctor_request(
        request_id,
        identity.doctor_id,
        body.status,
        schedule_note=body.schedule_note,
        proposed_slot=body.proposed_slot,
    )

    if result.outcome is TransitionOutcome.NOT_FOUND:
        raise NotFoundError("Request not found", resource="doctor_request")
    if result.outcome is TransitionOutcome.FORBIDDEN:
        raise PermissionDeniedError()
    if result.outcome is TransitionOutcome.INVALID_TRANSITION:
        raise ConflictError(
            f"Cannot move request from {result.request.status} to {body.status.value}",
            details={"code": "INVALID_TRANSITION", "current": result.request.status},
        )
    return DoctorRequestEnvelope(request=request_out(result.request))
