"""
Auth request/response schemas.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class LoginRequest(BaseModel):
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=1)


class SignupBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=120)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6)
    phone: Optional[str] = None


class PatientSignupRequest(SignupBase):
    model_config = ConfigDict(json_schema_extra={"example": {
        "name": "Muhammad Ahmed", "email": "ahmed@example.com", "password": "secret123",
        "age": 45, "gender": "Male", "blood_group": "O+"
    }})

    age: Optional[int] = Field(None, ge=1, le=150)
    gender: Optional[str] = None
    address: Optional[str] = None
    blood_group: Optional[str] = None


class DoctorSignupRequest(SignupBase):
    specialization: Optional[str] = None
    experience: Optional[str] = None
    qualifications: Optional[str] = None
    hospital_id: Optional[int] = None
    department_id: Optional[int] = None


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    role: str
    phone: Optional[str] = None
    profile_image: Optional[str] = None


class AuthResponse(BaseModel):
    success: bool = True
    token: Optional[str] = None
    user: UserOut
    patient_id: Optional[int] = None
    doctor_id: Optional[int] = None
