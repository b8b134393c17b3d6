"""
Medical file upload and listing for patients.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from starlette.concurrency import run_in_threadpool

from doctorpath.db import Storage
from doctorpath.models.files import MedicalFileOut, UploadResponse
from doctorpath.services.auth import Identity
from doctorpath.services.uploads import StoredUpload, discard_upload, store_upload
from doctorpath.utils import PermissionDeniedError, get_logger
from .deps import get_storage, require_patient

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Files"])


def _check_case_owner(storage: Storage, identity: Identity, case_id: int) -> None:
    case = storage.get_patient_case_by_id(case_id)
    if case is None or case.patient_id != identity.patient_id:
        raise PermissionDeniedError("Cannot attach file to this case")


def _record_upload(storage: Storage, identity: Identity, case_id: Optional[int], stored: StoredUpload):
    try:
        return storage.create_medical_file(
            patient_id=identity.patient_id,
            case_id=case_id,
            file_name=stored.original_name,
            file_type=stored.file_type,
            file_path=str(stored.path),
            file_size=stored.size,
            extracted_text=stored.extracted_text,
            file_metadata={"original_name": stored.original_name, "mime_type": stored.content_type},
        )
    except Exception:
        discard_upload(stored)
        raise


@router.post("/upload", response_model=UploadResponse, status_code=201)
async def upload_file(
    file: UploadFile = File(...),
    case_id: Optional[int] = Form(None),
    identity: Identity = Depends(require_patient),
    storage: Storage = Depends(get_storage),
):
    """
    Upload a PDF, image or DICOM file, optionally attached to one of the
    caller's cases. PDF text is extracted when possible; an unreadable PDF
    is still stored. A file whose record cannot be saved is removed again.
    """
    if case_id is not None:
        await run_in_threadpool(_check_case_owner, storage, identity, case_id)

    stored = await store_upload(file)
    record = await run_in_threadpool(_record_upload, storage, identity, case_id, stored)
    return UploadResponse(
        file=MedicalFileOut.model_validate(record),
        text_extracted=stored.extracted_text is not None,
        extraction_error=stored.extraction_error,
    )


@router.get("/files", response_model=List[MedicalFileOut])
def list_my_files(
    identity: Identity = Depends(require_patient),
    storage: Storage = Depends(get_storage),
):
    return storage.get_medical_files_by_patient(identity.patient_id)
