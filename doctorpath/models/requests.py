"""
Doctor request schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from doctorpath.core.access import RequestStatus


class DataShare(BaseModel):
    """What the patient chose to share with the doctor."""
    consent: bool = False
    note: Optional[str] = None
    file_id: Optional[int] = None


class DoctorRequestCreate(BaseModel):
    patient_id: Optional[int] = None  # defaults to the caller
    doctor_id: int
    hospital_id: Optional[int] = None
    note: Optional[str] = Field(None, max_length=2000)
    data_share: Optional[DataShare] = None


class DoctorRequestUpdate(BaseModel):
    status: RequestStatus
    schedule_note: Optional[str] = Field(None, max_length=2000)
    proposed_slot: Optional[str] = Field(None, max_length=200)


class DoctorRequestOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    doctor_id: int
    hospital_id: Optional[int] = None
    status: RequestStatus
    note: Optional[str] = None
    schedule_note: Optional[str] = None
    proposed_slot: Optional[str] = None
    data_share: Optional[DataShare] = None
    created_at: datetime
    updated_at: datetime

    # Filled in for list views
    patient_name: Optional[str] = None
    doctor_name: Optional[str] = None
    hospital_name: Optional[str] = None


class DoctorRequestEnvelope(BaseModel):
    success: bool = True
    request: DoctorRequestOut
