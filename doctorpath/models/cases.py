"""
Patient case schemas.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from doctorpath.core.reports import parse_stored_plan
from .files import MedicalFileOut


class CaseCreate(BaseModel):
    patient_id: int
    cancer_type: Optional[str] = None
    stage: Optional[str] = None
    tumor_size: Optional[str] = None
    biomarkers: Optional[Dict[str, Any]] = None
    diagnosis_data: Optional[Dict[str, Any]] = None


class CaseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    doctor_id: Optional[int] = None
    cancer_type: Optional[str] = None
    stage: Optional[str] = None
    tumor_size: Optional[str] = None
    biomarkers: Optional[Dict[str, Any]] = None
    diagnosis_data: Optional[Dict[str, Any]] = None
    treatment_plan: Optional[Dict[str, Any]] = None
    knowledge_graph: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("treatment_plan", mode="before")
    @classmethod
    def _load_plan(cls, v):
        if isinstance(v, str):
            return parse_stored_plan(v).model_dump()
        return v


class CaseDetail(CaseOut):
    files: List[MedicalFileOut] = Field(default_factory=list)
