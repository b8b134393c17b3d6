"""
Cancer Risk Scoring Engine

Dispatches a DiagnosisInput to the scoring table registered for its cancer
type, then rounds, clamps and tiers the raw probability.

Usage:
    from doctorpath.core.diagnosis import RiskScorer, DiagnosisInput

    result = RiskScorer().compute_risk(
        DiagnosisInput(cancer_type="liver", tumor_size=5, biomarker1=500)
    )
    print(result.probability, result.risk_level)

Adding a cancer type:
    1. Create  doctorpath/core/diagnosis/rules_<type>.py
    2. Implement score_<type>(DiagnosisInput) -> float
    3. Add the value to CancerType and register it in _CANCER_SCORERS below.
"""
from __future__ import annotations

import math
from typing import Callable, Dict, List

from doctorpath.utils import get_logger
from .base import CancerType, DiagnosisInput, DiagnosisResult, RiskLevel
from .rules_breast import score_breast
from .rules_liver import score_liver
from .rules_lung import score_lung

logger = get_logger(__name__)

# ── Registry: cancer type → scoring table ────────────────────────────────────
_CANCER_SCORERS: Dict[CancerType, Callable[[DiagnosisInput], float]] = {
    CancerType.LIVER:  score_liver,
    CancerType.LUNG:   score_lung,
    CancerType.BREAST: score_breast,
}

# Never report certainty.
MAX_PROBABILITY = 98
MIN_PROBABILITY = 0

HIGH_RISK_THRESHOLD     = 70
MODERATE_RISK_THRESHOLD = 40

_RECOMMENDATIONS = {
    RiskLevel.HIGH: (
        "High-risk indicators detected for {cancer} cancer. Immediate further "
        "diagnostic imaging and biopsy recommended. Consider multidisciplinary "
        "oncology consultation."
    ),
    RiskLevel.MODERATE: (
        "Moderate risk detected for {cancer} cancer. Recommend additional imaging "
        "studies (CT/MRI/PET scan) and close monitoring. Follow-up appointment "
        "in 2-4 weeks advised."
    ),
    RiskLevel.LOW: (
        "Current biomarkers show low risk for {cancer} cancer. Continue routine "
        "surveillance with follow-up testing in 3-6 months. Maintain healthy "
        "lifestyle factors."
    ),
}


def _round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; 21.5 must become 22.
    return int(math.floor(value + 0.5))


def clamp_probability(raw: float) -> int:
    """Round to the nearest integer and clamp into [0, 98]."""
    return max(MIN_PROBABILITY, min(MAX_PROBABILITY, _round_half_up(raw)))


def risk_level_for(probability: int) -> RiskLevel:
    if probability >= HIGH_RISK_THRESHOLD:
        return RiskLevel.HIGH
    if probability >= MODERATE_RISK_THRESHOLD:
        return RiskLevel.MODERATE
    return RiskLevel.LOW


def recommendation_for(level: RiskLevel, cancer_type: CancerType) -> str:
    return _RECOMMENDATIONS[level].format(cancer=cancer_type.value)


class RiskScorer:
    """
    Maps clinical inputs to a probability, a risk tier and a recommendation.

    Stateless and free of I/O, so a single instance can be shared across
    concurrent requests.

    Preconditions (enforced upstream by the request schema, asserted here):
        - cancer_type has a registered scoring table
        - tumor_size > 0
        - biomarker1 is a finite number
    """

    def compute_risk(self, diagnosis: DiagnosisInput) -> DiagnosisResult:
        assert diagnosis.cancer_type in _CANCER_SCORERS, diagnosis.cancer_type
        assert diagnosis.tumor_size > 0, diagnosis.tumor_size
        assert math.isfinite(diagnosis.biomarker1), diagnosis.biomarker1

        raw = _CANCER_SCORERS[diagnosis.cancer_type](diagnosis)
        probability = clamp_probability(raw)
        level = risk_level_for(probability)

        logger.debug(
            f"RiskScorer [{diagnosis.cancer_type.value}]: raw={raw:.2f} "
            f"probability={probability} level={level.value}"
        )

        return DiagnosisResult(
            probability=probability,
            risk_level=level,
            recommendation=recommendation_for(level, diagnosis.cancer_type),
            cancer_type=diagnosis.cancer_type.value.capitalize(),
            tumor_size=diagnosis.tumor_size,
        )

    @staticmethod
    def registered_cancer_types() -> List[CancerType]:
        return list(_CANCER_SCORERS.keys())


_default_scorer = RiskScorer()


def compute_risk(diagnosis: DiagnosisInput) -> DiagnosisResult:
    """Module-level shortcut around a shared RiskScorer."""
    return _default_scorer.compute_risk(diagnosis)
