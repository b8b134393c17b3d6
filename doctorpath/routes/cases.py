"""
Patient case endpoints: create, read, AI generation and PDF export.

Doctors act on a case only while they hold an accepted request with the
case's patient; patients see only their own cases.
"""
from typing import List, Tuple

from fastapi import APIRouter, Depends, Response, status
from starlette.concurrency import run_in_threadpool

from doctorpath.core.llm import OncologyAssistant
from doctorpath.core.reports import (
    TreatmentPlanReport,
    TreatmentPlanReportGenerator,
    parse_stored_plan,
)
from doctorpath.db import Storage
from doctorpath.db.models import PatientCase
from doctorpath.models.cases import CaseCreate, CaseDetail, CaseOut
from doctorpath.models.files import MedicalFileOut
from doctorpath.services.auth import Identity
from doctorpath.utils import InvalidRequestError, NotFoundError, get_logger
from .deps import (
    ensure_patient_data_access,
    get_assistant,
    get_current_identity,
    get_storage,
    require_doctor,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Cases"])

_report_generator = TreatmentPlanReportGenerator()


def _get_case(storage: Storage, identity: Identity, case_id: int) -> PatientCase:
    case = storage.get_patient_case_by_id(case_id)
    if case is None:
        raise NotFoundError("Case not found", resource="case")
    ensure_patient_data_access(storage, identity, case.patient_id)
    return case


@router.post("/cases", response_model=CaseOut, status_code=status.HTTP_201_CREATED)
def create_case(
    body: CaseCreate,
    identity: Identity = Depends(require_doctor),
    storage: Storage = Depends(get_storage),
):
    if storage.get_patient_by_id(body.patient_id) is None:
        raise NotFoundError("Patient not found", resource="patient")
    ensure_patient_data_access(storage, identity, body.patient_id)

    case = storage.create_patient_case(doctor_id=identity.doctor_id, **body.model_dump())
    logger.info(f"Case #{case.id} created by doctor {identity.doctor_id} for patient {case.patient_id}")
    return case


@router.get("/doctor/cases", response_model=List[CaseOut])
def list_doctor_cases(
    identity: Identity = Depends(require_doctor),
    storage: Storage = Depends(get_storage),
):
    return storage.get_patient_cases_by_doctor(identity.doctor_id)


@router.get("/cases/{case_id}", response_model=CaseDetail)
def get_case(
    case_id: int,
    identity: Identity = Depends(get_current_identity),
    storage: Storage = Depends(get_storage),
):
    case = _get_case(storage, identity, case_id)
    detail = CaseDetail.model_validate(case)
    detail.files = [MedicalFileOut.model_validate(f) for f in storage.get_medical_files_by_case(case_id)]
    return detail


def _graph_inputs(storage: Storage, identity: Identity, case_id: int) -> Tuple[PatientCase, str]:
    case = _get_case(storage, identity, case_id)
    extracted_text = "\n\n".join(
        f.extracted_text for f in storage.get_medical_files_by_case(case_id) if f.extracted_text
    )
    return case, extracted_text


def _treatment_inputs(storage: Storage, identity: Identity, case_id: int) -> Tuple[PatientCase, str]:
    case = _get_case(storage, identity, case_id)
    history = storage.get_medical_history_by_patient(case.patient_id)
    return case, "; ".join(f"{h.condition}: {h.treatment or 'No treatment'}" for h in history)


@router.post("/cases/{case_id}/generate-graph")
async def generate_graph(
    case_id: int,
    identity: Identity = Depends(require_doctor),
    storage: Storage = Depends(get_storage),
    assistant: OncologyAssistant = Depends(get_assistant),
):
    case, extracted_text = await run_in_threadpool(_graph_inputs, storage, identity, case_id)

    graph = await assistant.generate_knowledge_graph(
        cancer_type=case.cancer_type or "unknown",
        stage=case.stage,
        biomarkers=case.biomarkers,
        extracted_text=extracted_text or None,
    )
    graph_data = graph.model_dump()
    await run_in_threadpool(storage.update_patient_case, case_id, {"knowledge_graph": graph_data})
    logger.info(f"Case #{case_id}: knowledge graph with {len(graph.nodes)} nodes stored")
    return {"success": True, "graph": graph_data}


@router.post("/cases/{case_id}/generate-treatment")
async def generate_treatment(
    case_id: int,
    identity: Identity = Depends(require_doctor),
    storage: Storage = Depends(get_storage),
    assistant: OncologyAssistant = Depends(get_assistant),
):
    case, history_text = await run_in_threadpool(_treatment_inputs, storage, identity, case_id)

    plan = await assistant.generate_treatment_plan(
        cancer_type=case.cancer_type or "unknown",
        stage=case.stage,
        tumor_size=case.tumor_size,
        biomarkers=case.biomarkers,
        medical_history=history_text or None,
    )
    await run_in_threadpool(storage.update_patient_case, case_id, {"treatment_plan": plan.model_dump_json()})
    logger.info(f"Case #{case_id}: treatment plan stored")
    return {"success": True, "treatment_plan": plan.model_dump()}


@router.get("/cases/{case_id}/pdf")
def download_case_pdf(
    case_id: int,
    identity: Identity = Depends(get_current_identity),
    storage: Storage = Depends(get_storage),
):
    case = _get_case(storage, identity, case_id)
    if not case.treatment_plan:
        raise InvalidRequestError("No treatment plan generated yet")

    patient = storage.get_patient_by_id(case.patient_id)
    doctor = storage.get_doctor_by_id(case.doctor_id) if case.doctor_id else None
    report = TreatmentPlanReport(
        case_id=case.id,
        patient_name=patient.user.name if patient else "Unknown Patient",
        cancer_type=case.cancer_type or "Unknown",
        stage=case.stage,
        tumor_size=case.tumor_size,
        doctor_name=doctor.user.name if doctor else None,
        plan=parse_stored_plan(case.treatment_plan),
    )
    pdf = _report_generator.generate(report)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=treatment-plan-{case_id}.pdf"},
    )
