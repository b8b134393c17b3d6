"""
Chatbot and medical entity extraction endpoints.
"""
from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from doctorpath.core.llm import OncologyAssistant
from doctorpath.db import Storage
from doctorpath.models.assistant import ChatRequest, ChatResponse, ExtractEntitiesRequest
from doctorpath.services.auth import Identity
from doctorpath.utils import InvalidRequestError, NotFoundError
from .deps import ensure_patient_data_access, get_assistant, get_storage, require_doctor

router = APIRouter(prefix="/api", tags=["Assistant"])


@router.post("/chatbot", response_model=ChatResponse)
async def chatbot(body: ChatRequest, assistant: OncologyAssistant = Depends(get_assistant)):
    return ChatResponse(response=await assistant.chat(body.message))


def _stored_file_text(storage: Storage, identity: Identity, file_id: int) -> str:
    medical_file = storage.get_medical_file_by_id(file_id)
    if medical_file is None:
        raise NotFoundError("File not found", resource="medical_file")
    ensure_patient_data_access(storage, identity, medical_file.patient_id)
    if not medical_file.extracted_text:
        raise InvalidRequestError("No text available for this file")
    return medical_file.extracted_text


@router.post("/extract-entities")
async def extract_entities(
    body: ExtractEntitiesRequest,
    identity: Identity = Depends(require_doctor),
    storage: Storage = Depends(get_storage),
    assistant: OncologyAssistant = Depends(get_assistant),
):
    """Extract clinical entities from raw text or from a stored file's text."""
    text = body.text
    if not text and body.file_id is not None:
        text = await run_in_threadpool(_stored_file_text, storage, identity, body.file_id)

    if not text:
        raise InvalidRequestError("No text provided")

    entities = await assistant.extract_medical_entities(text)
    return {"success": True, "entities": entities.model_dump()}
