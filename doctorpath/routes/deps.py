"""
FastAPI dependencies shared by the routers.

Identity is resolved once per request from the session token (the
`Authorization: Bearer` header wins over the session cookie) and passed
to handlers as an argument.
"""
from functools import lru_cache
from typing import Callable, Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from doctorpath.config import settings
from doctorpath.core.llm import OncologyAssistant
from doctorpath.db import Storage, get_db
from doctorpath.services.auth import Identity, Role, resolve_identity
from doctorpath.utils import AuthenticationError, NotFoundError, PermissionDeniedError, get_logger

logger = get_logger(__name__)


def get_storage(db: Session = Depends(get_db)) -> Storage:
    return Storage(db)


def get_session_token(request: Request) -> Optional[str]:
    auth = request.headers.get("authorization", "")
    scheme, _, credentials = auth.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(settings.session_cookie_name)


def get_optional_identity(
    token: Optional[str] = Depends(get_session_token),
    storage: Storage = Depends(get_storage),
) -> Optional[Identity]:
    return resolve_identity(storage, token)


def get_current_identity(
    identity: Optional[Identity] = Depends(get_optional_identity),
) -> Identity:
    if identity is None:
        raise AuthenticationError()
    return identity


def require_role(role: Role) -> Callable[..., Identity]:
    """Dependency factory: 401 when unauthenticated, 403 for any other role."""

    def _dependency(identity: Identity = Depends(get_current_identity)) -> Identity:
        if identity.role is not role:
            raise PermissionDeniedError(f"{role.value.capitalize()} access required")
        if role is Role.PATIENT and identity.patient_id is None:
            raise NotFoundError("Patient profile not found", resource="patient")
        if role is Role.DOCTOR and identity.doctor_id is None:
            raise NotFoundError("Doctor profile not found", resource="doctor")
        return identity

    return _dependency


require_patient = require_role(Role.PATIENT)
require_doctor = require_role(Role.DOCTOR)


def ensure_patient_data_access(storage: Storage, identity: Identity, patient_id: int) -> None:
    """
    Patients may read only their own data; doctors need an accepted request
    with the patient. Raises PermissionDeniedError otherwise.
    """
    if identity.is_patient:
        if identity.patient_id != patient_id:
            raise PermissionDeniedError()
        return

    if identity.doctor_id is None or not storage.doctor_can_access_patient(identity.doctor_id, patient_id):
        logger.warning(f"Access denied: doctor={identity.doctor_id} patient={patient_id}")
        raise PermissionDeniedError("Access denied - no accepted request with this patient")


@lru_cache(maxsize=1)
def get_assistant() -> OncologyAssistant:
    return OncologyAssistant()
