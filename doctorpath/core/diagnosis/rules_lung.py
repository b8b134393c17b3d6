"""
Lung Cancer Scoring Rules

Inputs consumed:
    biomarker1        = CEA (carcinoembryonic antigen, ng/mL)
    additional_factor = smoking status ("current", "former", anything else = never)

The CEA band gives a base score which is scaled by the smoking multiplier.
"""
from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .base import DiagnosisInput

# ── Thresholds ────────────────────────────────────────────────────────────────

CEA_HIGH     = 10
CEA_ELEVATED = 5

SMOKING_MULTIPLIERS = {
    "current": 1.8,
    "former":  1.3,
}


def smoking_multiplier(status: Optional[str]) -> float:
    """Never-smokers and unknown status score at 1.0."""
    return SMOKING_MULTIPLIERS.get(status, 1.0)


def score_lung(diagnosis: "DiagnosisInput") -> float:
    """Raw (unclamped) probability for a lung work-up."""
    cea = diagnosis.biomarker1
    size = diagnosis.tumor_size
    multiplier = smoking_multiplier(diagnosis.additional_factor)

    if cea > CEA_HIGH:
        base = 60 + min(size * 4, 25)
    elif cea > CEA_ELEVATED:
        base = 35 + min(size * 3, 20)
    else:
        base = 10 + min(size * 2, 15)

    return base * multiplier
