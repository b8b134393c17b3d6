"""
Unit Tests for the Treatment Plan PDF Report
"""
import io
from datetime import datetime

import pytest
from pypdf import PdfReader

from doctorpath.core.llm import TreatmentPlan
from doctorpath.core.reports import (
    TreatmentPlanReport,
    TreatmentPlanReportGenerator,
    parse_stored_plan,
)


# Fixtures
@pytest.fixture
def plan() -> TreatmentPlan:
    return TreatmentPlan(
        summary="Early-stage non-small cell lung cancer.",
        primary_recommendation="Lobectomy with lymph node sampling",
        alternative_options=["Stereotactic body radiotherapy"],
        considerations=["FEV1 < 60% & smoker"],
        follow_up=["CT chest every 6 months"],
        references=["NCCN NSCLC"],
    )


@pytest.fixture
def report(plan) -> TreatmentPlanReport:
    return TreatmentPlanReport(
        case_id=12,
        patient_name="Asha Rao",
        cancer_type="lung",
        plan=plan,
        stage="IB",
        tumor_size="3.1 cm",
        doctor_name="Dr. Mehta",
        generated_at=datetime(2026, 10, 1, 9, 30),
    )


def _pdf_text(pdf: bytes) -> str:
    reader = PdfReader(io.BytesIO(pdf))
    return "\n".join(page.extract_text() or "" for page in reader.pages)


class TestTreatmentPlanReportGenerator:

    def test_renders_pdf(self, report):
        pdf = TreatmentPlanReportGenerator().generate(report)
        assert pdf.startswith(b"%PDF")

    def test_contains_plan_and_case_details(self, report):
        text = _pdf_text(TreatmentPlanReportGenerator().generate(report))
        assert "Lobectomy" in text
        assert "Asha Rao" in text
        assert "Stereotactic body radiotherapy" in text

    def test_markup_characters_are_escaped(self, report):
        """'<' and '&' would otherwise break reportlab's paragraph parser."""
        report.plan.summary = "Nodule <3 cm & no nodes"
        text = _pdf_text(TreatmentPlanReportGenerator().generate(report))
        assert "Nodule <3 cm & no nodes" in text

    def test_minimal_plan(self):
        minimal = TreatmentPlanReport(
            case_id=1, patient_name="P", cancer_type="liver",
            plan=TreatmentPlan(summary="Summary only"),
        )
        assert TreatmentPlanReportGenerator().generate(minimal).startswith(b"%PDF")

    def test_report_to_dict(self, report):
        data = report.to_dict()
        assert data["case_id"] == 12
        assert data["generated_at"] == "2026-10-01T09:30:00"


class TestParseStoredPlan:

    def test_round_trips_stored_json(self, plan):
        assert parse_stored_plan(plan.model_dump_json()) == plan

    def test_camel_case_document(self):
        parsed = parse_stored_plan('{"summary": "s", "primaryRecommendation": "Surgery"}')
        assert parsed.primary_recommendation == "Surgery"

    @pytest.mark.parametrize("raw", ["free text plan", "[1, 2]", '{"no_summary": true}'])
    def test_non_plan_text_becomes_summary(self, raw):
        parsed = parse_stored_plan(raw)
        assert parsed.summary == raw
        assert parsed.primary_recommendation == "See summary"
