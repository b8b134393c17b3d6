"""
Password hashing and server-side sessions.

A session is an opaque random token stored in the `sessions` table. Each
HTTP request resolves its token once into an immutable Identity that the
route handlers receive as an argument.
"""
import secrets
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Optional

import bcrypt

from doctorpath.config import settings
from doctorpath.db.storage import Storage
from doctorpath.utils import AuthenticationError, get_logger

logger = get_logger(__name__)

BCRYPT_ROUNDS = 10


class Role(str, Enum):
    PATIENT = "patient"
    DOCTOR  = "doctor"


@dataclass(frozen=True)
class Identity:
    """Who is calling. Exactly one of patient_id / doctor_id is set."""
    user_id: int
    role: Role
    patient_id: Optional[int] = None
    doctor_id: Optional[int] = None

    @property
    def is_patient(self) -> bool:
        return self.role is Role.PATIENT

    @property
    def is_doctor(self) -> bool:
        return self.role is Role.DOCTOR


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        logger.warning("verify_password: stored hash is not a bcrypt hash")
        return False


def authenticate(storage: Storage, email: str, password: str):
    """Return the user for valid credentials, else raise AuthenticationError."""
    user = storage.get_user_by_email(email)
    if user is None or not verify_password(password, user.password_hash):
        logger.info(f"Failed login for {email}")
        raise AuthenticationError("Invalid credentials")
    return user


def start_session(storage: Storage, user_id: int, ttl_hours: Optional[int] = None) -> str:
    token = secrets.token_urlsafe(32)
    ttl = timedelta(hours=ttl_hours if ttl_hours is not None else settings.session_ttl_hours)
    storage.create_session(token, user_id, ttl)
    return token


def end_session(storage: Storage, token: str) -> None:
    storage.delete_session(token)


def resolve_identity(storage: Storage, token: Optional[str]) -> Optional[Identity]:
    """Map a session token to an Identity, or None when it is missing/expired."""
    if not token:
        return None
    session = storage.get_session(token)
    if session is None:
        return None
    user = storage.get_user_by_id(session.user_id)
    if user is None:
        return None

    role = Role(user.role)
    if role is Role.PATIENT:
        patient = storage.get_patient_by_user_id(user.id)
        return Identity(user.id, role, patient_id=patient.id if patient else None)
    doctor = storage.get_doctor_by_user_id(user.id)
    return Identity(user.id, role, doctor_id=doctor.id if doctor else None)
