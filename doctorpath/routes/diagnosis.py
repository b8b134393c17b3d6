"""
Diagnosis calculator endpoint.
"""
from fastapi import APIRouter, Depends

from doctorpath.core.diagnosis import RiskScorer
from doctorpath.models.diagnosis import DiagnosisRequest, DiagnosisResponse
from doctorpath.services.auth import Identity
from doctorpath.utils import get_logger
from .deps import require_doctor

logger = get_logger(__name__)

router = APIRouter(prefix="/api/diagnosis", tags=["Diagnosis"])

_scorer = RiskScorer()


@router.post("/calculate", response_model=DiagnosisResponse)
def calculate(body: DiagnosisRequest, identity: Identity = Depends(require_doctor)):
    """Score cancer risk from biomarker and tumor-size inputs."""
    result = _scorer.compute_risk(body.to_input())
    logger.info(
        f"Diagnosis by doctor {identity.doctor_id}: {result.cancer_type} "
        f"{result.probability}% ({result.risk_level.value})"
    )
    return DiagnosisResponse(**result.to_dict())
