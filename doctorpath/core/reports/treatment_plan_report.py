"""
Treatment Plan Report Generator

Renders a case's AI-generated treatment plan as a downloadable PDF:
- Case summary table (patient, doctor, cancer type, stage, tumor size)
- Plan summary and primary recommendation
- Bulleted alternative options, considerations, follow-up and references
- Decision-support disclaimer
"""
import io
import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from reportlab.lib.colors import HexColor, white
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from xml.sax.saxutils import escape

from doctorpath.core.llm.oncology_assistant import TreatmentPlan
from doctorpath.utils import ReportGenerationError, get_logger

logger = get_logger(__name__)

BRAND_COLOR = HexColor("#1E40AF")
HEADER_BG   = HexColor("#DBEAFE")
GRID_COLOR  = HexColor("#CBD5E1")

DISCLAIMER = (
    "This treatment plan was generated by an AI decision-support system and is "
    "intended for review by a qualified oncologist. It is not a substitute for "
    "professional medical judgement."
)


@dataclass
class TreatmentPlanReport:
    """Data container for one treatment-plan PDF."""
    case_id: int
    patient_name: str
    cancer_type: str
    plan: TreatmentPlan
    stage: Optional[str] = None
    tumor_size: Optional[str] = None
    doctor_name: Optional[str] = None
    generated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "case_id": self.case_id,
            "patient_name": self.patient_name,
            "cancer_type": self.cancer_type,
            "stage": self.stage,
            "tumor_size": self.tumor_size,
            "doctor_name": self.doctor_name,
            "generated_at": self.generated_at.isoformat(),
        }


def parse_stored_plan(raw: str) -> TreatmentPlan:
    """
    Load a stored treatment plan. Text that is not a valid plan document
    becomes a summary-only plan.
    """
    try:
        return TreatmentPlan.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError, TypeError):
        return TreatmentPlan(summary=raw, primary_recommendation="See summary")


class TreatmentPlanReportGenerator:
    """Builds treatment-plan PDFs in memory."""

    def __init__(self):
        self._styles = getSampleStyleSheet()
        self._create_custom_styles()

    def _create_custom_styles(self):
        if 'ReportTitle' not in self._styles:
            self._styles.add(ParagraphStyle(
                name='ReportTitle',
                parent=self._styles['Title'],
                fontSize=22,
                spaceAfter=18,
                textColor=BRAND_COLOR,
                alignment=TA_CENTER,
                fontName='Helvetica-Bold'
            ))

        if 'SectionHeader' not in self._styles:
            self._styles.add(ParagraphStyle(
                name='SectionHeader',
                parent=self._styles['Heading2'],
                fontSize=14,
                spaceBefore=16,
                spaceAfter=8,
                textColor=HexColor("#1F2937"),
                fontName='Helvetica-Bold'
            ))

        if 'PlanBody' not in self._styles:
            self._styles.add(ParagraphStyle(
                name='PlanBody',
                parent=self._styles['Normal'],
                fontSize=11,
                spaceAfter=6,
                leading=15,
                alignment=TA_JUSTIFY
            ))

        if 'PlanBullet' not in self._styles:
            self._styles.add(ParagraphStyle(
                name='PlanBullet',
                parent=self._styles['Normal'],
                fontSize=10.5,
                leading=14,
                leftIndent=14,
                spaceAfter=4
            ))

        if 'Disclaimer' not in self._styles:
            self._styles.add(ParagraphStyle(
                name='Disclaimer',
                parent=self._styles['Normal'],
                fontSize=8.5,
                textColor=HexColor("#6B7280"),
                spaceBefore=18
            ))

    def generate(self, report: TreatmentPlanReport) -> bytes:
        """
        Render the report to PDF bytes.

        Raises:
            ReportGenerationError: reportlab failed to build the document
        """
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=2 * cm,
            rightMargin=2 * cm,
            topMargin=2 * cm,
            bottomMargin=2 * cm,
            title=f"Treatment Plan - Case {report.case_id}",
        )
        try:
            doc.build(self._build_story(report))
        except Exception as e:
            logger.error(f"Treatment plan PDF for case {report.case_id} failed: {e}", exc_info=True)
            raise ReportGenerationError(f"PDF generation failed: {e}", report_type="treatment_plan")

        pdf = buffer.getvalue()
        logger.info(f"Treatment plan PDF generated for case {report.case_id} ({len(pdf)} bytes)")
        return pdf

    def _build_story(self, report: TreatmentPlanReport) -> List[Any]:
        plan = report.plan
        story: List[Any] = [
            Paragraph("DoctorPath AI - Treatment Plan", self._styles['ReportTitle']),
            self._case_table(report),
            Spacer(1, 12),
            Paragraph("Summary", self._styles['SectionHeader']),
            Paragraph(escape(plan.summary), self._styles['PlanBody']),
            Paragraph("Primary Recommendation", self._styles['SectionHeader']),
            Paragraph(escape(plan.primary_recommendation or "Not specified"), self._styles['PlanBody']),
        ]

        for title, items in (
            ("Alternative Options", plan.alternative_options),
            ("Considerations", plan.considerations),
            ("Follow-up", plan.follow_up),
            ("References", plan.references),
        ):
            if not items:
                continue
            story.append(Paragraph(title, self._styles['SectionHeader']))
            for item in items:
                story.append(Paragraph(f"• {escape(item)}", self._styles['PlanBullet']))

        story.append(Paragraph(DISCLAIMER, self._styles['Disclaimer']))
        return story

    def _case_table(self, report: TreatmentPlanReport) -> Table:
        rows = [
            ["Case ID", str(report.case_id)],
            ["Patient", report.patient_name],
            ["Cancer Type", report.cancer_type],
            ["Stage", report.stage or "To be determined"],
            ["Tumor Size", report.tumor_size or "Unknown"],
            ["Doctor", report.doctor_name or "Not assigned"],
            ["Generated", report.generated_at.strftime("%Y-%m-%d %H:%M")],
        ]
        table = Table(rows, colWidths=[4 * cm, 11 * cm])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (0, -1), HEADER_BG),
            ('TEXTCOLOR', (0, 0), (0, -1), BRAND_COLOR),
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('BACKGROUND', (1, 0), (1, -1), white),
            ('GRID', (0, 0), (-1, -1), 0.5, GRID_COLOR),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('TOPPADDING', (0, 0), (-1, -1), 5),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 5),
        ]))
        return table
