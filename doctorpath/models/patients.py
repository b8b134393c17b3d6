"""
Patient profile and medical-history schemas.
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class PatientProfile(BaseModel):
    """Patient row joined with the public fields of its user."""
    id: int
    user_id: int
    name: str
    email: str
    phone: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    blood_group: Optional[str] = None


class PatientUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=120)
    phone: Optional[str] = None
    age: Optional[int] = Field(None, ge=1, le=150)
    gender: Optional[str] = None
    address: Optional[str] = None
    blood_group: Optional[str] = None


class PatientSearchResult(BaseModel):
    id: int
    name: str
    email: str
    age: Optional[int] = None
    gender: Optional[str] = None


class MedicalHistoryCreate(BaseModel):
    condition: str = Field(..., min_length=1)
    diagnosis_date: Optional[datetime] = None
    treatment: Optional[str] = None
    status: Optional[Literal["active", "resolved"]] = None
    notes: Optional[str] = None


class MedicalHistoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    condition: str
    diagnosis_date: Optional[datetime] = None
    treatment: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
