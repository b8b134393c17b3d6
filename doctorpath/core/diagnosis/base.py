"""
Diagnosis Risk Scoring - Base Types

Defines the value objects that flow through the cancer-risk scorer.
Nothing here is persisted; the HTTP layer builds a DiagnosisInput from a
validated request body and serialises the DiagnosisResult.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class CancerType(str, Enum):
    """Cancer types with a registered scoring table."""
    LIVER  = "liver"
    LUNG   = "lung"
    BREAST = "breast"


class RiskLevel(str, Enum):
    """
    Coarse risk tier derived from the probability.

    HIGH     – probability >= 70
    MODERATE – 40 <= probability < 70
    LOW      – probability < 40
    """
    LOW      = "Low"
    MODERATE = "Moderate"
    HIGH     = "High"


@dataclass
class DiagnosisInput:
    """
    Clinical inputs for one risk calculation.

    biomarker1 is the primary serum marker for the cancer type:
        liver  → AFP (ng/mL)
        lung   → CEA (ng/mL)
        breast → CA 15-3 (U/mL)
    biomarker2 is a categorical marker (HER2 status for breast).
    additional_factor is a categorical modifier (smoking status for lung).
    """
    cancer_type: CancerType
    tumor_size: float                        # centimetres, > 0
    biomarker1: float
    biomarker2: Optional[str] = None
    additional_factor: Optional[str] = None

    def __post_init__(self):
        self.cancer_type = CancerType(self.cancer_type)


@dataclass(frozen=True)
class DiagnosisResult:
    """Outcome of a risk calculation."""
    probability: int                         # 0..98
    risk_level: RiskLevel
    recommendation: str
    cancer_type: str                         # capitalised, e.g. "Liver"
    tumor_size: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "probability": self.probability,
            "risk_level": self.risk_level.value,
            "recommendation": self.recommendation,
            "cancer_type": self.cancer_type,
            "tumor_size": self.tumor_size,
        }
