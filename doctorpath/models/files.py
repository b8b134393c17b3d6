"""
Medical file schemas.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class MedicalFileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    case_id: Optional[int] = None
    file_name: str
    file_type: str
    file_size: Optional[int] = None
    extracted_text: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="file_metadata")
    created_at: datetime


class UploadResponse(BaseModel):
    success: bool = True
    file: MedicalFileOut
    text_extracted: bool
    extraction_error: Optional[str] = None
