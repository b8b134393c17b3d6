"""
Unit Tests for the Cancer Risk Scorer

Worked examples, band boundaries, rounding, and sweeps over the input
space for the range, tier and monotonicity properties.
"""
import itertools

import pytest
from pydantic import ValidationError

from doctorpath.core.diagnosis import (
    CancerType,
    DiagnosisInput,
    RiskLevel,
    RiskScorer,
    compute_risk,
    risk_level_for,
)
from doctorpath.models.diagnosis import DiagnosisRequest

SIZES = [0.1, 0.5, 1, 2.5, 4, 5, 7.5, 10, 15, 30, 100]
BIOMARKERS = [0, 3, 5, 5.01, 10, 10.5, 20, 20.5, 30, 31, 100, 101, 400, 401, 5000]
CATEGORIES = [None, "positive", "negative", "current", "former", "never"]


def _expected_level(probability: int) -> RiskLevel:
    if probability >= 70:
        return RiskLevel.HIGH
    if probability >= 40:
        return RiskLevel.MODERATE
    return RiskLevel.LOW


# Fixtures
@pytest.fixture
def scorer() -> RiskScorer:
    return RiskScorer()


class TestWorkedExamples:
    """Reference cases with hand-computed results."""

    def test_liver_very_high_afp(self, scorer):
        """AFP 500, 5 cm: 75 + min(15, 20) = 90."""
        result = scorer.compute_risk(DiagnosisInput("liver", tumor_size=5, biomarker1=500))
        assert result.probability == 90
        assert result.risk_level is RiskLevel.HIGH

    def test_lung_current_smoker_low_cea(self, scorer):
        """CEA 3, 1 cm, current smoker: (10 + 2) * 1.8 = 21.6 -> 22."""
        result = scorer.compute_risk(
            DiagnosisInput("lung", tumor_size=1, biomarker1=3, additional_factor="current")
        )
        assert result.probability == 22
        assert result.risk_level is RiskLevel.LOW

    def test_breast_her2_positive_is_clamped(self, scorer):
        """CA 15-3 150, 4 cm, HER2+: (70 + 12) * 1.4 = 114.8 -> 98."""
        result = scorer.compute_risk(
            DiagnosisInput("breast", tumor_size=4, biomarker1=150, biomarker2="positive")
        )
        assert result.probability == 98
        assert result.risk_level is RiskLevel.HIGH

    def test_breast_low_marker_no_her2(self, scorer):
        """CA 15-3 20, 2 cm: 12 + 2 = 14."""
        result = scorer.compute_risk(DiagnosisInput("breast", tumor_size=2, biomarker1=20))
        assert result.probability == 14
        assert result.risk_level is RiskLevel.LOW

    def test_module_level_shortcut_matches_scorer(self, scorer):
        diagnosis = DiagnosisInput("liver", tumor_size=3, biomarker1=50)
        assert compute_risk(diagnosis) == scorer.compute_risk(diagnosis)


class TestBands:
    """Band edges use strict greater-than on the biomarker."""

    @pytest.mark.parametrize("afp,expected", [
        (400, 45 + 2),    # upper edge of the elevated band
        (400.5, 75 + 3),
        (20, 15 + 1),     # upper edge of the normal band
        (21, 45 + 2),
    ])
    def test_liver_edges(self, scorer, afp, expected):
        result = scorer.compute_risk(DiagnosisInput("liver", tumor_size=1, biomarker1=afp))
        assert result.probability == expected

    @pytest.mark.parametrize("cea,expected", [
        (10, 35 + 3),
        (10.1, 60 + 4),
        (5, 10 + 2),
        (5.1, 35 + 3),
    ])
    def test_lung_edges_never_smoker(self, scorer, cea, expected):
        result = scorer.compute_risk(DiagnosisInput("lung", tumor_size=1, biomarker1=cea))
        assert result.probability == expected

    @pytest.mark.parametrize("ca153,expected", [
        (100, 40 + 2),
        (101, 70 + 3),
        (30, 12 + 1),
        (31, 40 + 2),
    ])
    def test_breast_edges(self, scorer, ca153, expected):
        result = scorer.compute_risk(DiagnosisInput("breast", tumor_size=1, biomarker1=ca153))
        assert result.probability == expected

    def test_size_term_is_capped(self, scorer):
        small = scorer.compute_risk(DiagnosisInput("liver", tumor_size=15, biomarker1=10))
        huge = scorer.compute_risk(DiagnosisInput("liver", tumor_size=150, biomarker1=10))
        assert small.probability == huge.probability == 30

    def test_former_smoker_multiplier(self, scorer):
        """(35 + 6) * 1.3 = 53.3 -> 53."""
        result = scorer.compute_risk(
            DiagnosisInput("lung", tumor_size=2, biomarker1=8, additional_factor="former")
        )
        assert result.probability == 53
        assert result.risk_level is RiskLevel.MODERATE

    def test_her2_negative_has_no_effect(self, scorer):
        plain = scorer.compute_risk(DiagnosisInput("breast", tumor_size=3, biomarker1=50))
        negative = scorer.compute_risk(
            DiagnosisInput("breast", tumor_size=3, biomarker1=50, biomarker2="negative")
        )
        assert plain.probability == negative.probability == 46


class TestRounding:
    """Halves round up, unlike Python's round()."""

    def test_half_rounds_up(self, scorer):
        """12 + 2.5 = 14.5 -> 15 (round() would give 14)."""
        result = scorer.compute_risk(DiagnosisInput("breast", tumor_size=2.5, biomarker1=20))
        assert result.probability == 15

    def test_below_half_rounds_down(self, scorer):
        """(10 + 2.5) * 1.3 = 16.25 -> 16."""
        result = scorer.compute_risk(
            DiagnosisInput("lung", tumor_size=1.25, biomarker1=1, additional_factor="former")
        )
        assert result.probability == 16


class TestRiskTiers:
    """Tier is a step function of the probability."""

    @pytest.mark.parametrize("probability,level", [
        (0, RiskLevel.LOW),
        (39, RiskLevel.LOW),
        (40, RiskLevel.MODERATE),
        (69, RiskLevel.MODERATE),
        (70, RiskLevel.HIGH),
        (98, RiskLevel.HIGH),
    ])
    def test_thresholds(self, probability, level):
        assert risk_level_for(probability) is level

    def test_high_recommendation_names_cancer_type(self, scorer):
        result = scorer.compute_risk(DiagnosisInput("lung", tumor_size=5, biomarker1=50))
        assert result.risk_level is RiskLevel.HIGH
        assert "lung cancer" in result.recommendation
        assert "biopsy" in result.recommendation

    def test_moderate_recommendation(self, scorer):
        result = scorer.compute_risk(DiagnosisInput("liver", tumor_size=1, biomarker1=100))
        assert result.risk_level is RiskLevel.MODERATE
        assert "CT/MRI/PET" in result.recommendation

    def test_low_recommendation(self, scorer):
        result = scorer.compute_risk(DiagnosisInput("liver", tumor_size=1, biomarker1=5))
        assert result.risk_level is RiskLevel.LOW
        assert "routine surveillance" in result.recommendation


class TestResultShape:

    def test_echoes_inputs(self, scorer):
        result = scorer.compute_risk(DiagnosisInput("breast", tumor_size=2.2, biomarker1=40))
        assert result.cancer_type == "Breast"
        assert result.tumor_size == 2.2

    def test_to_dict(self, scorer):
        data = scorer.compute_risk(DiagnosisInput("liver", tumor_size=5, biomarker1=500)).to_dict()
        assert data == {
            "probability": 90,
            "risk_level": "High",
            "recommendation": data["recommendation"],
            "cancer_type": "Liver",
            "tumor_size": 5,
        }

    def test_string_cancer_type_is_coerced(self):
        assert DiagnosisInput("lung", tumor_size=1, biomarker1=1).cancer_type is CancerType.LUNG

    def test_unknown_cancer_type_rejected(self):
        with pytest.raises(ValueError):
            DiagnosisInput("pancreas", tumor_size=1, biomarker1=1)

    def test_every_cancer_type_is_registered(self):
        assert set(RiskScorer.registered_cancer_types()) == set(CancerType)


class TestPreconditions:
    """Malformed input is a caller error, caught by assertions."""

    def test_non_positive_tumor_size(self, scorer):
        with pytest.raises(AssertionError):
            scorer.compute_risk(DiagnosisInput("liver", tumor_size=0, biomarker1=10))

    def test_nan_biomarker(self, scorer):
        with pytest.raises(AssertionError):
            scorer.compute_risk(DiagnosisInput("liver", tumor_size=1, biomarker1=float("nan")))


class TestProperties:
    """Sweeps over the input grid."""

    @pytest.mark.parametrize("cancer_type", list(CancerType))
    def test_probability_in_range_and_tier_consistent(self, scorer, cancer_type):
        for size, marker, category in itertools.product(SIZES, BIOMARKERS, CATEGORIES):
            result = scorer.compute_risk(DiagnosisInput(
                cancer_type, tumor_size=size, biomarker1=marker,
                biomarker2=category, additional_factor=category,
            ))
            assert 0 <= result.probability <= 98
            assert isinstance(result.probability, int)
            assert result.risk_level is _expected_level(result.probability)

    @pytest.mark.parametrize("afp", [0, 20, 21, 400, 401, 10000])
    def test_liver_monotone_in_tumor_size(self, scorer, afp):
        probabilities = [
            scorer.compute_risk(DiagnosisInput("liver", tumor_size=s, biomarker1=afp)).probability
            for s in SIZES
        ]
        assert probabilities == sorted(probabilities)


class TestDiagnosisRequest:
    """Request schema in front of the scorer."""

    def test_negative_biomarker_accepted(self):
        body = DiagnosisRequest(cancer_type="liver", tumor_size=1, biomarker1=-1)
        assert compute_risk(body.to_input()).probability == 16

    @pytest.mark.parametrize("marker", [float("nan"), float("inf")])
    def test_non_finite_biomarker_rejected(self, marker):
        with pytest.raises(ValidationError):
            DiagnosisRequest(cancer_type="liver", tumor_size=1, biomarker1=marker)

    def test_categories_passed_through_unchanged(self):
        body = DiagnosisRequest(
            cancer_type="breast", tumor_size=4, biomarker1=150,
            biomarker2="Positive", additional_factor=" Current ",
        )
        assert body.biomarker2 == "Positive"
        assert body.additional_factor == " Current "

    def test_wrong_case_her2_gets_no_multiplier(self):
        body = DiagnosisRequest(cancer_type="breast", tumor_size=4, biomarker1=150, biomarker2="Positive")
        assert compute_risk(body.to_input()).probability == 82

    def test_exact_her2_positive_multiplies(self):
        body = DiagnosisRequest(cancer_type="breast", tumor_size=4, biomarker1=150, biomarker2="positive")
        assert compute_risk(body.to_input()).probability == 98
