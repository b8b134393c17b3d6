"""
ORM row → response schema helpers for rows that join their user.
"""
from doctorpath.db.models import Doctor, DoctorRequest, Patient
from doctorpath.models.directory import DoctorProfile
from doctorpath.models.patients import PatientProfile
from doctorpath.models.requests import DoctorRequestOut


def doctor_profile(doctor: Doctor) -> DoctorProfile:
    return DoctorProfile(
        id=doctor.id,
        user_id=doctor.user_id,
        name=doctor.user.name,
        email=doctor.user.email,
        phone=doctor.user.phone,
        specialization=doctor.specialization,
        experience=doctor.experience,
        qualifications=doctor.qualifications,
        hospital_id=doctor.hospital_id,
        department_id=doctor.department_id,
    )


def patient_profile(patient: Patient) -> PatientProfile:
    return PatientProfile(
        id=patient.id,
        user_id=patient.user_id,
        name=patient.user.name,
        email=patient.user.email,
        phone=patient.user.phone,
        age=patient.age,
        gender=patient.gender,
        address=patient.address,
        blood_group=patient.blood_group,
    )


def request_out(request: DoctorRequest, enrich: bool = False) -> DoctorRequestOut:
    out = DoctorRequestOut.model_validate(request)
    if enrich:
        out.patient_name = request.patient.user.name if request.patient else None
        out.doctor_name = request.doctor.user.name if request.doctor else None
        out.hospital_name = request.hospital.name if request.hospital else None
    return out
