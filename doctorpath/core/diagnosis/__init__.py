"""
Cancer Risk Scoring

Deterministic risk calculator: biomarker bands per cancer type, optional
multipliers, rounding, clamping and a three-tier recommendation.

Usage:
    from doctorpath.core.diagnosis import compute_risk, DiagnosisInput

    result = compute_risk(DiagnosisInput("lung", tumor_size=1, biomarker1=3,
                                         additional_factor="current"))
"""
from .base import CancerType, DiagnosisInput, DiagnosisResult, RiskLevel
from .engine import RiskScorer, compute_risk, risk_level_for

__all__ = [
    "CancerType",
    "DiagnosisInput",
    "DiagnosisResult",
    "RiskLevel",
    "RiskScorer",
    "compute_risk",
    "risk_level_for",
]
