"""
Patient profile, history and doctor-side patient lists.
"""
from typing import List

from fastapi import APIRouter, Depends, Query

from doctorpath.db import Storage
from doctorpath.models.files import MedicalFileOut
from doctorpath.models.patients import (
    MedicalHistoryCreate,
    MedicalHistoryOut,
    PatientProfile,
    PatientSearchResult,
    PatientUpdate,
)
from doctorpath.services.auth import Identity
from doctorpath.utils import NotFoundError, PermissionDeniedError, get_logger
from .deps import (
    ensure_patient_data_access,
    get_current_identity,
    get_storage,
    require_doctor,
    require_patient,
)
from .serializers import patient_profile

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Patients"])

_USER_FIELDS = {"name", "phone"}
MIN_SEARCH_LENGTH = 2


def _get_patient_or_404(storage: Storage, patient_id: int):
    patient = storage.get_patient_by_id(patient_id)
    if patient is None:
        raise NotFoundError("Patient not found", resource="patient")
    return patient


@router.get("/patients/{patient_id}", response_model=PatientProfile)
def get_patient(
    patient_id: int,
    identity: Identity = Depends(get_current_identity),
    storage: Storage = Depends(get_storage),
):
    patient = _get_patient_or_404(storage, patient_id)
    ensure_patient_data_access(storage, identity, patient_id)
    return patient_profile(patient)


@router.patch("/patients/{patient_id}", response_model=PatientProfile)
def update_patient(
    patient_id: int,
    body: PatientUpdate,
    identity: Identity = Depends(require_patient),
    storage: Storage = Depends(get_storage),
):
    if identity.patient_id != patient_id:
        raise PermissionDeniedError()
    patient = _get_patient_or_404(storage, patient_id)

    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    user_changes = {k: v for k, v in changes.items() if k in _USER_FIELDS}
    patient_changes = {k: v for k, v in changes.items() if k not in _USER_FIELDS}
    if user_changes:
        storage.update_user(patient.user_id, user_changes)
    if patient_changes:
        patient = storage.update_patient(patient_id, patient_changes)
    return patient_profile(patient)


@router.get("/patients/{patient_id}/files", response_model=List[MedicalFileOut])
def get_patient_files(
    patient_id: int,
    identity: Identity = Depends(get_current_identity),
    storage: Storage = Depends(get_storage),
):
    _get_patient_or_404(storage, patient_id)
    ensure_patient_data_access(storage, identity, patient_id)
    return storage.get_medical_files_by_patient(patient_id)


@router.get("/patients/{patient_id}/history", response_model=List[MedicalHistoryOut])
def get_patient_history(
    patient_id: int,
    identity: Identity = Depends(get_current_identity),
    storage: Storage = Depends(get_storage),
):
    _get_patient_or_404(storage, patient_id)
    ensure_patient_data_access(storage, identity, patient_id)
    return storage.get_medical_history_by_patient(patient_id)


@router.post("/patient/history", response_model=MedicalHistoryOut, status_code=201)
def add_history_entry(
    body: MedicalHistoryCreate,
    identity: Identity = Depends(require_patient),
    storage: Storage = Depends(get_storage),
):
    return storage.create_medical_history(patient_id=identity.patient_id, **body.model_dump())


@router.get("/doctor/patients", response_model=List[PatientProfile])
def list_my_patients(
    identity: Identity = Depends(require_doctor),
    storage: Storage = Depends(get_storage),
):
    """Distinct patients with at least one accepted request to this doctor."""
    patients = []
    for patient_id in storage.get_accepted_patient_ids(identity.doctor_id):
        patient = storage.get_patient_by_id(patient_id)
        if patient is not None:
            patients.append(patient_profile(patient))
    return patients


@router.get("/doctor/patients/search", response_model=List[PatientSearchResult])
def search_patients(
    q: str = Query("", max_length=100),
    identity: Identity = Depends(require_doctor),
    storage: Storage = Depends(get_storage),
):
    query = q.strip()
    if len(query) < MIN_SEARCH_LENGTH:
        return []
    return [
        PatientSearchResult(
            id=patient.id, name=user.name, email=user.email,
            age=patient.age, gender=patient.gender,
        )
        for patient, user in storage.search_patients(query)
    ]
