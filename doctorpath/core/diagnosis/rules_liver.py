"""
Liver Cancer Scoring Rules

Biomarker consumed:
    biomarker1 = AFP (alpha-fetoprotein, ng/mL)

Bands (highest first):
    1. AFP > 400        : strongly suggestive of hepatocellular carcinoma
    2. 20 < AFP <= 400  : elevated
    3. AFP <= 20        : within the usual reference range
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .base import DiagnosisInput

# ── Thresholds ────────────────────────────────────────────────────────────────

AFP_VERY_HIGH = 400
AFP_ELEVATED  = 20


def score_liver(diagnosis: "DiagnosisInput") -> float:
    """Raw (unclamped) probability for a liver work-up."""
    afp = diagnosis.biomarker1
    size = diagnosis.tumor_size

    if afp > AFP_VERY_HIGH:
        return 75 + min(size * 3, 20)
    if afp > AFP_ELEVATED:
        return 45 + min(size * 2, 25)
    return 15 + min(size, 15)
