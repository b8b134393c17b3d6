"""
Authentication endpoints: login, signup, current user, logout.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from doctorpath.config import settings
from doctorpath.db import Storage
from doctorpath.models.auth import (
    AuthResponse,
    DoctorSignupRequest,
    LoginRequest,
    PatientSignupRequest,
    UserOut,
)
from doctorpath.models.common import MessageResponse
from doctorpath.services.auth import (
    Identity,
    Role,
    authenticate,
    end_session,
    hash_password,
    start_session,
)
from doctorpath.utils import ConflictError, InvalidRequestError, get_logger
from .deps import get_current_identity, get_session_token, get_storage

logger = get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_ttl_hours * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )


def _auth_response(storage: Storage, user, token: Optional[str]) -> AuthResponse:
    patient = storage.get_patient_by_user_id(user.id) if user.role == Role.PATIENT.value else None
    doctor = storage.get_doctor_by_user_id(user.id) if user.role == Role.DOCTOR.value else None
    return AuthResponse(
        token=token,
        user=UserOut.model_validate(user),
        patient_id=patient.id if patient else None,
        doctor_id=doctor.id if doctor else None,
    )


def _ensure_email_free(storage: Storage, email: str) -> None:
    if storage.get_user_by_email(email) is not None:
        raise ConflictError("Email already registered", details={"email": email})


@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, response: Response, storage: Storage = Depends(get_storage)):
    user = authenticate(storage, body.email, body.password)
    token = start_session(storage, user.id)
    _set_session_cookie(response, token)
    logger.info(f"User {user.id} logged in as {user.role}")
    return _auth_response(storage, user, token)


@router.post("/signup/patient", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup_patient(
    body: PatientSignupRequest,
    response: Response,
    storage: Storage = Depends(get_storage),
):
    _ensure_email_free(storage, body.email)
    user = storage.create_user(
        email=body.email,
        password_hash=hash_password(body.password),
        name=body.name,
        role=Role.PATIENT.value,
        phone=body.phone,
    )
    storage.create_patient(
        user_id=user.id,
        age=body.age,
        gender=body.gender,
        address=body.address,
        blood_group=body.blood_group,
    )
    token = start_session(storage, user.id)
    _set_session_cookie(response, token)
    logger.info(f"Patient account created for user {user.id}")
    return _auth_response(storage, user, token)


@router.post("/signup/doctor", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup_doctor(
    body: DoctorSignupRequest,
    response: Response,
    storage: Storage = Depends(get_storage),
):
    _ensure_email_free(storage, body.email)
    if body.hospital_id is not None and storage.get_hospital_by_id(body.hospital_id) is None:
        raise InvalidRequestError("Unknown hospital", details={"hospital_id": body.hospital_id})
    if body.department_id is not None:
        department_ids = {
            d.id for d in storage.get_departments_by_hospital(body.hospital_id)
        } if body.hospital_id is not None else set()
        if body.department_id not in department_ids:
            raise InvalidRequestError(
                "Department does not belong to the hospital",
                details={"department_id": body.department_id},
            )

    user = storage.create_user(
        email=body.email,
        password_hash=hash_password(body.password),
        name=body.name,
        role=Role.DOCTOR.value,
        phone=body.phone,
    )
    storage.create_doctor(
        user_id=user.id,
        specialization=body.specialization,
        experience=body.experience,
        qualifications=body.qualifications,
        hospital_id=body.hospital_id,
        department_id=body.department_id,
    )
    token = start_session(storage, user.id)
    _set_session_cookie(response, token)
    logger.info(f"Doctor account created for user {user.id}")
    return _auth_response(storage, user, token)


@router.get("/me", response_model=AuthResponse)
def me(
    identity: Identity = Depends(get_current_identity),
    storage: Storage = Depends(get_storage),
):
    user = storage.get_user_by_id(identity.user_id)
    return _auth_response(storage, user, None)


@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    identity: Identity = Depends(get_current_identity),
    token: Optional[str] = Depends(get_session_token),
    storage: Storage = Depends(get_storage),
):
    if token:
        end_session(storage, token)
    response.delete_cookie(settings.session_cookie_name)
    logger.info(f"User {identity.user_id} logged out")
    return MessageResponse(message="Logged out")
