"""
Hospital / department / doctor directory endpoints.
"""
from typing import List

from fastapi import APIRouter, Depends

from doctorpath.db import Storage
from doctorpath.models.directory import DepartmentOut, DoctorProfile, DoctorUpdate, HospitalOut
from doctorpath.services.auth import Identity
from doctorpath.utils import InvalidRequestError, NotFoundError, PermissionDeniedError, get_logger
from .deps import get_storage, require_doctor
from .serializers import doctor_profile

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Directory"])

_USER_FIELDS = {"name", "phone"}


@router.get("/hospitals", response_model=List[HospitalOut])
def list_hospitals(storage: Storage = Depends(get_storage)):
    return storage.get_all_hospitals()


@router.get("/departments/{hospital_id}", response_model=List[DepartmentOut])
def list_departments(hospital_id: int, storage: Storage = Depends(get_storage)):
    return storage.get_departments_by_hospital(hospital_id)


@router.get("/doctors/department/{department_id}", response_model=List[DoctorProfile])
def list_doctors_by_department(department_id: int, storage: Storage = Depends(get_storage)):
    return [doctor_profile(d) for d in storage.get_doctors_by_department(department_id)]


@router.get("/doctors/{hospital_id}", response_model=List[DoctorProfile])
def list_doctors_by_hospital(hospital_id: int, storage: Storage = Depends(get_storage)):
    return [doctor_profile(d) for d in storage.get_doctors_by_hospital(hospital_id)]


@router.patch("/doctors/{doctor_id}", response_model=DoctorProfile)
def update_doctor(
    doctor_id: int,
    body: DoctorUpdate,
    identity: Identity = Depends(require_doctor),
    storage: Storage = Depends(get_storage),
):
    """Doctors may edit only their own profile."""
    if identity.doctor_id != doctor_id:
        raise PermissionDeniedError()
    doctor = storage.get_doctor_by_id(doctor_id)
    if doctor is None:
        raise NotFoundError("Doctor not found", resource="doctor")

    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if changes.get("hospital_id") is not None and storage.get_hospital_by_id(changes["hospital_id"]) is None:
        raise InvalidRequestError("Unknown hospital", details={"hospital_id": changes["hospital_id"]})

    user_changes = {k: v for k, v in changes.items() if k in _USER_FIELDS}
    doctor_changes = {k: v for k, v in changes.items() if k not in _USER_FIELDS}
    if user_changes:
        storage.update_user(doctor.user_id, user_changes)
    if doctor_changes:
        doctor = storage.update_doctor(doctor_id, doctor_changes)

    logger.info(f"Doctor {doctor_id} updated fields: {sorted(changes)}")
    return doctor_profile(doctor)
