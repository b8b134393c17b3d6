"""
Diagnosis calculator schemas.

Validation here is what the risk scorer relies on: a known cancer type,
a positive finite tumor size and a finite biomarker. The category fields
are passed through untouched; only the exact values "positive" and
"current"/"former" change the score.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from doctorpath.core.diagnosis import CancerType, DiagnosisInput


class DiagnosisRequest(BaseModel):
    model_config = ConfigDict(json_schema_extra={"example": {
        "cancer_type": "lung", "tumor_size": 1.0, "biomarker1": 3.0,
        "additional_factor": "current"
    }})

    cancer_type: CancerType
    tumor_size: float = Field(..., gt=0, allow_inf_nan=False, description="centimetres")
    biomarker1: float = Field(..., allow_inf_nan=False)
    biomarker2: Optional[str] = None
    additional_factor: Optional[str] = None

    def to_input(self) -> DiagnosisInput:
        return DiagnosisInput(
            cancer_type=self.cancer_type,
            tumor_size=self.tumor_size,
            biomarker1=self.biomarker1,
            biomarker2=self.biomarker2,
            additional_factor=self.additional_factor,
        )


class DiagnosisResponse(BaseModel):
    success: bool = True
    probability: int
    risk_level: str
    recommendation: str
    cancer_type: str
    tumor_size: float
