"""PDF report generation."""
from .treatment_plan_report import (
    TreatmentPlanReport,
    TreatmentPlanReportGenerator,
    parse_stored_plan,
)

__all__ = ["TreatmentPlanReport", "TreatmentPlanReportGenerator", "parse_stored_plan"]
