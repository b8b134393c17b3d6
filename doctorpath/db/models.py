"""
ORM models.

One table per record kind. Patients and doctors extend a shared `users`
row that holds the login credentials and display name.
"""
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite has no timezone-aware column type."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False)  # "patient" or "doctor"
    phone = Column(String)
    profile_image = Column(String)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    patient = relationship("Patient", back_populates="user", uselist=False)
    doctor = relationship("Doctor", back_populates="user", uselist=False)


class Patient(Base):
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)
    age = Column(Integer)
    gender = Column(String)
    address = Column(String)
    blood_group = Column(String)

    user = relationship("User", back_populates="patient")


class Hospital(Base):
    __tablename__ = "hospitals"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    branch_code = Column(String, unique=True, nullable=False)
    address = Column(String)
    city = Column(String)
    phone = Column(String)

    departments = relationship("Department", back_populates="hospital")


class Department(Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, index=True)
    hospital_id = Column(Integer, ForeignKey("hospitals.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text)

    hospital = relationship("Hospital", back_populates="departments")


class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)
    specialization = Column(String)
    experience = Column(String)
    qualifications = Column(String)
    hospital_id = Column(Integer, ForeignKey("hospitals.id"), index=True)
    department_id = Column(Integer, ForeignKey("departments.id"), index=True)

    user = relationship("User", back_populates="doctor")
    hospital = relationship("Hospital")
    department = relationship("Department")


class DoctorRequest(Base):
    """
    Patient-initiated request to connect with a doctor.

    status is one of pending / accepted / declined / reschedule; rows are
    never deleted.
    """
    __tablename__ = "doctor_requests"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    hospital_id = Column(Integer, ForeignKey("hospitals.id"))
    status = Column(String, nullable=False, default="pending")
    note = Column(Text)
    schedule_note = Column(Text)
    proposed_slot = Column(String)
    data_share = Column(JSON)  # {"consent": bool, "note": str, "file_id": int}
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    patient = relationship("Patient")
    doctor = relationship("Doctor")
    hospital = relationship("Hospital")


class PatientCase(Base):
    __tablename__ = "patient_cases"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), index=True)
    cancer_type = Column(String)
    stage = Column(String)
    tumor_size = Column(String)
    biomarkers = Column(JSON)
    diagnosis_data = Column(JSON)
    treatment_plan = Column(Text)  # JSON document as produced by the assistant
    knowledge_graph = Column(JSON)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    patient = relationship("Patient")
    doctor = relationship("Doctor")
    files = relationship("MedicalFile", back_populates="case")


class MedicalFile(Base):
    __tablename__ = "medical_files"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    case_id = Column(Integer, ForeignKey("patient_cases.id"), index=True)
    file_name = Column(String, nullable=False)
    file_type = Column(String, nullable=False)
    file_path = Column(String, nullable=False)
    file_size = Column(Integer)
    extracted_text = Column(Text)
    file_metadata = Column("metadata", JSON)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    case = relationship("PatientCase", back_populates="files")


class MedicalHistory(Base):
    __tablename__ = "medical_history"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    condition = Column(String, nullable=False)
    diagnosis_date = Column(DateTime)
    treatment = Column(Text)
    status = Column(String)  # active, resolved
    notes = Column(Text)
    created_at = Column(DateTime, default=utcnow, nullable=False)


class SessionToken(Base):
    """Server-side login session keyed by an opaque token."""
    __tablename__ = "sessions"

    token = Column(String, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False)

    user = relationship("User")
