"""
Hospital, department and doctor schemas.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class HospitalOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    branch_code: str
    address: Optional[str] = None
    city: Optional[str] = None
    phone: Optional[str] = None


class DepartmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    hospital_id: int
    name: str
    description: Optional[str] = None


class DoctorProfile(BaseModel):
    """Doctor row joined with the public fields of its user."""
    id: int
    user_id: int
    name: str
    email: str
    phone: Optional[str] = None
    specialization: Optional[str] = None
    experience: Optional[str] = None
    qualifications: Optional[str] = None
    hospital_id: Optional[int] = None
    department_id: Optional[int] = None


class DoctorUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=120)
    phone: Optional[str] = None
    specialization: Optional[str] = None
    experience: Optional[str] = None
    qualifications: Optional[str] = None
    hospital_id: Optional[int] = None
    department_id: Optional[int] = None
