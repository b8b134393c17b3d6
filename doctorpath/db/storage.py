"""
Storage Layer

CRUD operations over the ORM models, wrapping one SQLAlchemy session.
Route handlers receive a Storage through a FastAPI dependency; nothing
here knows about HTTP.

All list queries return newest records first.
"""
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from doctorpath.core.access import (
    INITIAL_STATUS,
    RequestStatus,
    TransitionOutcome,
    TransitionResult,
    can_doctor_access_patient_case,
    evaluate_transition,
)
from doctorpath.utils import get_logger
from .models import (
    Department,
    Doctor,
    DoctorRequest,
    Hospital,
    MedicalFile,
    MedicalHistory,
    Patient,
    PatientCase,
    SessionToken,
    User,
    utcnow,
)

logger = get_logger(__name__)


class Storage:
    """Repository over a single SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def _add(self, obj):
        self.db.add(obj)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(obj)
        return obj

    def _update(self, obj, data: Dict[str, Any]):
        for key, value in data.items():
            setattr(obj, key, value)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    # ── Users ────────────────────────────────────────────────────────────────

    def create_user(self, **data) -> User:
        return self._add(User(**data))

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).one_or_none()

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def update_user(self, user_id: int, data: Dict[str, Any]) -> Optional[User]:
        user = self.get_user_by_id(user_id)
        return self._update(user, data) if user else None

    # ── Patients ─────────────────────────────────────────────────────────────

    def create_patient(self, **data) -> Patient:
        return self._add(Patient(**data))

    def get_patient_by_id(self, patient_id: int) -> Optional[Patient]:
        return self.db.get(Patient, patient_id)

    def get_patient_by_user_id(self, user_id: int) -> Optional[Patient]:
        return self.db.query(Patient).filter(Patient.user_id == user_id).one_or_none()

    def update_patient(self, patient_id: int, data: Dict[str, Any]) -> Optional[Patient]:
        patient = self.get_patient_by_id(patient_id)
        return self._update(patient, data) if patient else None

    def search_patients(self, query: str, limit: int = 20) -> List[Tuple[Patient, User]]:
        """Case-insensitive substring match on user name or email."""
        pattern = f"%{query}%"
        return (
            self.db.query(Patient, User)
            .join(User, Patient.user_id == User.id)
            .filter(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
            .order_by(User.name)
            .limit(limit)
            .all()
        )

    # ── Doctors ──────────────────────────────────────────────────────────────

    def create_doctor(self, **data) -> Doctor:
        return self._add(Doctor(**data))

    def get_doctor_by_id(self, doctor_id: int) -> Optional[Doctor]:
        return self.db.get(Doctor, doctor_id)

    def get_doctor_by_user_id(self, user_id: int) -> Optional[Doctor]:
        return self.db.query(Doctor).filter(Doctor.user_id == user_id).one_or_none()

    def get_doctors_by_hospital(self, hospital_id: int) -> List[Doctor]:
        return self.db.query(Doctor).filter(Doctor.hospital_id == hospital_id).all()

    def get_doctors_by_department(self, department_id: int) -> List[Doctor]:
        return self.db.query(Doctor).filter(Doctor.department_id == department_id).all()

    def update_doctor(self, doctor_id: int, data: Dict[str, Any]) -> Optional[Doctor]:
        doctor = self.get_doctor_by_id(doctor_id)
        return self._update(doctor, data) if doctor else None

    # ── Hospitals & departments ──────────────────────────────────────────────

    def create_hospital(self, **data) -> Hospital:
        return self._add(Hospital(**data))

    def get_hospital_by_id(self, hospital_id: int) -> Optional[Hospital]:
        return self.db.get(Hospital, hospital_id)

    def get_all_hospitals(self) -> List[Hospital]:
        return self.db.query(Hospital).order_by(Hospital.id).all()

    def count_hospitals(self) -> int:
        return self.db.query(Hospital).count()

    def create_department(self, **data) -> Department:
        return self._add(Department(**data))

    def get_departments_by_hospital(self, hospital_id: int) -> List[Department]:
        return self.db.query(Department).filter(Department.hospital_id == hospital_id).all()

    # ── Doctor requests ──────────────────────────────────────────────────────

    def create_doctor_request(self, **data) -> DoctorRequest:
        data["status"] = INITIAL_STATUS.value
        request = self._add(DoctorRequest(**data))
        logger.info(
            f"DoctorRequest #{request.id} created: patient={request.patient_id} "
            f"doctor={request.doctor_id}"
        )
        return request

    def get_doctor_request_by_id(self, request_id: int) -> Optional[DoctorRequest]:
        return self.db.get(DoctorRequest, request_id)

    def get_doctor_requests_by_patient(self, patient_id: int) -> List[DoctorRequest]:
        return (
            self.db.query(DoctorRequest)
            .filter(DoctorRequest.patient_id == patient_id)
            .order_by(DoctorRequest.created_at.desc(), DoctorRequest.id.desc())
            .all()
        )

    def get_doctor_requests_by_doctor(self, doctor_id: int) -> List[DoctorRequest]:
        return (
            self.db.query(DoctorRequest)
            .filter(DoctorRequest.doctor_id == doctor_id)
            .order_by(DoctorRequest.created_at.desc(), DoctorRequest.id.desc())
            .all()
        )

    def get_doctor_requests_for_pair(self, doctor_id: int, patient_id: int) -> List[DoctorRequest]:
        return (
            self.db.query(DoctorRequest)
            .filter(
                DoctorRequest.doctor_id == doctor_id,
                DoctorRequest.patient_id == patient_id,
            )
            .all()
        )

    def doctor_can_access_patient(self, doctor_id: int, patient_id: int) -> bool:
        return can_doctor_access_patient_case(
            self.get_doctor_requests_for_pair(doctor_id, patient_id),
            doctor_id,
            patient_id,
        )

    def get_accepted_patient_ids(self, doctor_id: int) -> List[int]:
        rows = (
            self.db.query(DoctorRequest.patient_id)
            .filter(
                DoctorRequest.doctor_id == doctor_id,
                DoctorRequest.status == RequestStatus.ACCEPTED.value,
            )
            .distinct()
            .all()
        )
        return [row[0] for row in rows]

    def transition_doctor_request(
        self,
        request_id: int,
        actor_doctor_id: Optional[int],
        target: RequestStatus,
        schedule_note: Optional[str] = None,
        proposed_slot: Optional[str] = None,
    ) -> TransitionResult:
        """
        Move a request to `target` on behalf of a doctor.

        The row is read with FOR UPDATE (a no-op on SQLite, where the
        write transaction already serialises) so the decision and the
        write happen against the same version of the row. Anything other
        than APPLIED rolls back and leaves the row untouched.
        """
        request = (
            self.db.query(DoctorRequest)
            .filter(DoctorRequest.id == request_id)
            .with_for_update()
            .one_or_none()
        )
        outcome = evaluate_transition(request, actor_doctor_id, target)

        if outcome is not TransitionOutcome.APPLIED:
            self.db.rollback()
            logger.warning(
                f"DoctorRequest #{request_id}: transition to {RequestStatus(target).value} "
                f"by doctor={actor_doctor_id} rejected ({outcome.value})"
            )
            return TransitionResult(outcome=outcome, request=request)

        previous = request.status
        request.status = RequestStatus(target).value
        if schedule_note is not None:
            request.schedule_note = schedule_note
        if proposed_slot is not None:
            request.proposed_slot = proposed_slot
        request.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(request)

        logger.info(f"DoctorRequest #{request.id}: {previous} → {request.status}")
        return TransitionResult(outcome=outcome, request=request)

    # ── Patient cases ────────────────────────────────────────────────────────

    def create_patient_case(self, **data) -> PatientCase:
        return self._add(PatientCase(**data))

    def get_patient_case_by_id(self, case_id: int) -> Optional[PatientCase]:
        return self.db.get(PatientCase, case_id)

    def get_patient_cases_by_doctor(self, doctor_id: int) -> List[PatientCase]:
        return (
            self.db.query(PatientCase)
            .filter(PatientCase.doctor_id == doctor_id)
            .order_by(PatientCase.created_at.desc(), PatientCase.id.desc())
            .all()
        )

    def get_patient_cases_by_patient(self, patient_id: int) -> List[PatientCase]:
        return (
            self.db.query(PatientCase)
            .filter(PatientCase.patient_id == patient_id)
            .order_by(PatientCase.created_at.desc(), PatientCase.id.desc())
            .all()
        )

    def update_patient_case(self, case_id: int, data: Dict[str, Any]) -> Optional[PatientCase]:
        case = self.get_patient_case_by_id(case_id)
        if case is None:
            return None
        data = {**data, "updated_at": utcnow()}
        return self._update(case, data)

    # ── Medical files ────────────────────────────────────────────────────────

    def create_medical_file(self, **data) -> MedicalFile:
        return self._add(MedicalFile(**data))

    def get_medical_file_by_id(self, file_id: int) -> Optional[MedicalFile]:
        return self.db.get(MedicalFile, file_id)

    def get_medical_files_by_patient(self, patient_id: int) -> List[MedicalFile]:
        return (
            self.db.query(MedicalFile)
            .filter(MedicalFile.patient_id == patient_id)
            .order_by(MedicalFile.created_at.desc(), MedicalFile.id.desc())
            .all()
        )

    def get_medical_files_by_case(self, case_id: int) -> List[MedicalFile]:
        return (
            self.db.query(MedicalFile)
            .filter(MedicalFile.case_id == case_id)
            .order_by(MedicalFile.created_at.desc(), MedicalFile.id.desc())
            .all()
        )

    # ── Medical history ──────────────────────────────────────────────────────

    def create_medical_history(self, **data) -> MedicalHistory:
        return self._add(MedicalHistory(**data))

    def get_medical_history_by_patient(self, patient_id: int) -> List[MedicalHistory]:
        return (
            self.db.query(MedicalHistory)
            .filter(MedicalHistory.patient_id == patient_id)
            .order_by(MedicalHistory.created_at.desc(), MedicalHistory.id.desc())
            .all()
        )

    # ── Sessions ─────────────────────────────────────────────────────────────

    def create_session(self, token: str, user_id: int, ttl: timedelta) -> SessionToken:
        now = utcnow()
        return self._add(SessionToken(
            token=token, user_id=user_id, created_at=now, expires_at=now + ttl,
        ))

    def get_session(self, token: str, now: Optional[datetime] = None) -> Optional[SessionToken]:
        """Live session for `token`; expired rows are treated as missing."""
        session = self.db.get(SessionToken, token)
        if session is None:
            return None
        if session.expires_at <= (now or utcnow()):
            return None
        return session

    def delete_session(self, token: str) -> None:
        self.db.query(SessionToken).filter(SessionToken.token == token).delete()
        self.db.commit()

    def purge_expired_sessions(self, now: Optional[datetime] = None) -> int:
        removed = (
            self.db.query(SessionToken)
            .filter(SessionToken.expires_at <= (now or utcnow()))
            .delete()
        )
        self.db.commit()
        return removed
