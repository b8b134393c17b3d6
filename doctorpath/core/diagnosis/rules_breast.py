"""
Breast Cancer Scoring Rules

Inputs consumed:
    biomarker1 = CA 15-3 (U/mL)
    biomarker2 = HER2 status ("positive" raises the score)
"""
from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .base import DiagnosisInput

# ── Thresholds ────────────────────────────────────────────────────────────────

CA153_HIGH     = 100
CA153_ELEVATED = 30

HER2_POSITIVE_MULTIPLIER = 1.4


def her2_multiplier(status: Optional[str]) -> float:
    return HER2_POSITIVE_MULTIPLIER if status == "positive" else 1.0


def score_breast(diagnosis: "DiagnosisInput") -> float:
    """Raw (unclamped) probability for a breast work-up."""
    ca153 = diagnosis.biomarker1
    size = diagnosis.tumor_size
    multiplier = her2_multiplier(diagnosis.biomarker2)

    if ca153 > CA153_HIGH:
        base = 70 + min(size * 3, 20)
    elif ca153 > CA153_ELEVATED:
        base = 40 + min(size * 2, 25)
    else:
        base = 12 + min(size, 15)

    return base * multiplier
