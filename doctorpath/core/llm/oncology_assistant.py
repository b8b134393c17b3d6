"""
Oncology Assistant

Prompt templates and output parsing for the AI features: entity
extraction, knowledge graphs, treatment plans and the chatbot.

The model is asked for bare JSON. Replies are stripped of markdown code
fences and validated with pydantic; an unavailable model raises
LLMUnavailableError and an unusable reply raises LLMResponseError. The
chatbot never raises: it falls back to keyword answers.
"""
import json
import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from doctorpath.utils import LLMResponseError, LLMUnavailableError, get_logger
from .gemini_client import GeminiClient, GeminiResponse

logger = get_logger(__name__)

MAX_CLINICAL_NOTES_CHARS = 2000

_FENCE_RE = re.compile(r"```(?:json)?\n?|\n?```")


# ── Output models ────────────────────────────────────────────────────────────

class Measurement(BaseModel):
    name: str
    value: str = ""
    unit: str = ""

    @field_validator("value", "unit", mode="before")
    @classmethod
    def _stringify(cls, v):
        return "" if v is None else str(v)


class MedicalEntities(BaseModel):
    conditions: List[str] = Field(default_factory=list)
    medications: List[str] = Field(default_factory=list)
    procedures: List[str] = Field(default_factory=list)
    biomarkers: List[str] = Field(default_factory=list)
    symptoms: List[str] = Field(default_factory=list)
    measurements: List[Measurement] = Field(default_factory=list)


class GraphNode(BaseModel):
    id: str
    type: str
    label: str
    properties: Dict[str, Any] = Field(default_factory=dict)


class GraphEdge(BaseModel):
    source: str
    target: str
    relationship: str


class KnowledgeGraph(BaseModel):
    nodes: List[GraphNode] = Field(default_factory=list)
    edges: List[GraphEdge] = Field(default_factory=list)


class TreatmentPlan(BaseModel):
    """Accepts the camelCase keys the model is prompted with and snake_case."""
    model_config = ConfigDict(populate_by_name=True)

    summary: str
    primary_recommendation: str = Field("", alias="primaryRecommendation")
    alternative_options: List[str] = Field(default_factory=list, alias="alternativeOptions")
    considerations: List[str] = Field(default_factory=list)
    follow_up: List[str] = Field(default_factory=list, alias="followUp")
    references: List[str] = Field(default_factory=list)


# ── Prompt templates ─────────────────────────────────────────────────────────

ENTITY_PROMPT = """You are a medical entity extraction system. Analyze the following medical text and extract entities.

Return a JSON object with exactly this structure (no markdown, just JSON):
{{
  "conditions": ["list of medical conditions/diagnoses"],
  "medications": ["list of medications mentioned"],
  "procedures": ["list of medical procedures"],
  "biomarkers": ["list of biomarkers like AFP, CEA, CA 15-3"],
  "symptoms": ["list of symptoms"],
  "measurements": [{{"name": "measurement name", "value": "numeric value", "unit": "unit"}}]
}}

Medical Text:
{text}

JSON Response:"""

GRAPH_PROMPT = """You are a medical knowledge graph generator for oncology. Create a knowledge graph based on patient data.

Patient Data:
- Cancer Type: {cancer_type}
- Stage: {stage}
- Biomarkers: {biomarkers}
{notes}
Generate a knowledge graph with nodes and edges. Return a JSON object with exactly this structure (no markdown):
{{
  "nodes": [
    {{"id": "unique_id", "type": "Disease|Symptom|Treatment|Biomarker|Finding", "label": "display name", "properties": {{}}}}
  ],
  "edges": [
    {{"source": "node_id_1", "target": "node_id_2", "relationship": "causes|treats|indicates|associated_with"}}
  ]
}}

Include nodes for:
1. The primary cancer diagnosis
2. Relevant biomarkers and their significance
3. Standard treatment options for this cancer type/stage
4. Key decision points

JSON Response:"""

TREATMENT_PROMPT = """You are an oncology clinical decision support system. Generate a comprehensive treatment plan based on the patient data.

IMPORTANT: This is for decision support only. All recommendations must be reviewed by a qualified oncologist.

Patient Data:
- Cancer Type: {cancer_type}
- Stage: {stage}
- Tumor Size: {tumor_size}
- Biomarkers: {biomarkers}
{history}
Generate a treatment plan. Return a JSON object with exactly this structure (no markdown):
{{
  "summary": "Brief overview of the case and treatment approach",
  "primaryRecommendation": "The recommended first-line treatment",
  "alternativeOptions": ["Alternative treatment option 1", "Alternative treatment option 2"],
  "considerations": ["Important consideration 1", "Important consideration 2"],
  "followUp": ["Follow-up recommendation 1", "Follow-up recommendation 2"],
  "references": ["NCCN Guidelines reference", "Other clinical guideline"]
}}

JSON Response:"""

CHAT_SYSTEM_INSTRUCTION = (
    "You are a medical AI assistant for DoctorPath AI, an oncology support platform. "
    "Keep responses brief and helpful."
)


# ── Keyword fallback for the chatbot ─────────────────────────────────────────

_GREETING_RE = re.compile(r"\b(hello|hi)\b")

FALLBACK_ANSWERS = {
    "greeting": (
        "Hello! I'm your AI health assistant. I can help answer general health questions "
        "about cancer, symptoms, and treatment options. How can I assist you today?"
    ),
    "symptoms": (
        "Common cancer symptoms can vary by type, but general warning signs include: "
        "unexplained weight loss, fatigue, fever, pain, skin changes, bowel or bladder "
        "changes, persistent cough, and unusual bleeding. If you experience persistent "
        "symptoms, please consult with your doctor for proper evaluation."
    ),
    "liver": (
        "Liver cancer symptoms may include: unintentional weight loss, loss of appetite, "
        "upper abdominal pain, nausea, general weakness, abdominal swelling, and yellowing "
        "of skin (jaundice). Risk factors include chronic hepatitis B/C infection, cirrhosis, "
        "and excessive alcohol use. Early detection through regular screening is important "
        "for those at risk."
    ),
    "lung": (
        "Lung cancer warning signs include: persistent cough, coughing up blood, shortness "
        "of breath, chest pain, hoarseness, unexplained weight loss, and recurrent respiratory "
        "infections. Smoking is the leading risk factor. If you're experiencing these "
        "symptoms, especially with a history of smoking, please see your doctor immediately."
    ),
    "breast": (
        "Breast cancer signs to watch for include: a lump in the breast or underarm, changes "
        "in breast size or shape, skin dimpling, nipple discharge, and redness or scaling. "
        "Regular self-exams and mammograms are important for early detection. If you notice "
        "any changes, consult your healthcare provider promptly."
    ),
    "treatment": (
        "Cancer treatment options depend on the type and stage, and may include: surgery, "
        "chemotherapy, radiation therapy, immunotherapy, targeted therapy, and hormone "
        "therapy. Your oncologist will recommend the best treatment plan based on your "
        "specific diagnosis. It's important to discuss all options and potential side "
        "effects with your medical team."
    ),
    "appointment": (
        "To schedule an appointment, use the 'Choose Your Doctor' section on your dashboard. "
        "Select a hospital and doctor, then send a request with your symptoms or concerns. "
        "The doctor will review and respond with available appointment times."
    ),
    "results": (
        "You can view your uploaded reports in the files section of your dashboard. If you "
        "have questions about specific results, discuss them with your doctor who can "
        "provide personalized interpretation and guidance."
    ),
    "default": (
        "I'm here to help with general health information and navigate the DoctorPath AI "
        "platform. For personalized medical advice, please consult with your healthcare "
        "provider. Is there something specific about cancer symptoms, treatments, or using "
        "this platform I can help you with?"
    ),
}

EMPTY_MESSAGE_ANSWER = "Please enter a message."


def fallback_answer(message: str) -> str:
    """Keyword-matched canned answer, checked in a fixed priority order."""
    text = message.lower()
    if _GREETING_RE.search(text):
        return FALLBACK_ANSWERS["greeting"]
    if "cancer" in text and "symptom" in text:
        return FALLBACK_ANSWERS["symptoms"]
    if "liver cancer" in text:
        return FALLBACK_ANSWERS["liver"]
    if "lung cancer" in text:
        return FALLBACK_ANSWERS["lung"]
    if "breast cancer" in text:
        return FALLBACK_ANSWERS["breast"]
    if "treatment" in text or "therapy" in text:
        return FALLBACK_ANSWERS["treatment"]
    if "appointment" in text or "doctor" in text:
        return FALLBACK_ANSWERS["appointment"]
    if "test" in text or "result" in text:
        return FALLBACK_ANSWERS["results"]
    return FALLBACK_ANSWERS["default"]


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


class OncologyAssistant:
    """
    Fixed-prompt wrapper over GeminiClient for oncology decision support.

    Usage:
        assistant = OncologyAssistant(GeminiClient())
        plan = await assistant.generate_treatment_plan("liver", stage="II")
    """

    def __init__(self, client: Optional[GeminiClient] = None):
        self.client = client or GeminiClient()

    @property
    def is_available(self) -> bool:
        return self.client.is_available

    async def _generate_json(self, prompt: str, task: str, model_cls):
        response: GeminiResponse = await self.client.generate_async(prompt)
        if not self.client.is_available:
            raise LLMUnavailableError("AI service is not configured", details={"task": task})
        if not response.success:
            logger.error(f"OncologyAssistant [{task}]: model call failed: {response.error}")
            raise LLMResponseError(f"AI request failed: {response.error}", task=task)

        cleaned = strip_code_fences(response.text)
        try:
            return model_cls.model_validate_json(cleaned)
        except ValidationError as e:
            logger.error(f"OncologyAssistant [{task}]: unparseable reply ({e.error_count()} errors)")
            raise LLMResponseError(f"Failed to parse {task} response", task=task)

    async def extract_medical_entities(self, text: str) -> MedicalEntities:
        return await self._generate_json(
            ENTITY_PROMPT.format(text=text), "entity_extraction", MedicalEntities,
        )

    async def generate_knowledge_graph(
        self,
        cancer_type: str,
        stage: Optional[str] = None,
        biomarkers: Optional[Dict[str, Any]] = None,
        extracted_text: Optional[str] = None,
    ) -> KnowledgeGraph:
        notes = (
            f"- Clinical Notes: {extracted_text[:MAX_CLINICAL_NOTES_CHARS]}\n"
            if extracted_text else ""
        )
        prompt = GRAPH_PROMPT.format(
            cancer_type=cancer_type,
            stage=stage or "Unknown",
            biomarkers=json.dumps(biomarkers or {}),
            notes=notes,
        )
        return await self._generate_json(prompt, "knowledge_graph", KnowledgeGraph)

    async def generate_treatment_plan(
        self,
        cancer_type: str,
        stage: Optional[str] = None,
        tumor_size: Optional[str] = None,
        biomarkers: Optional[Dict[str, Any]] = None,
        medical_history: Optional[str] = None,
    ) -> TreatmentPlan:
        history = f"- Medical History: {medical_history}\n" if medical_history else ""
        prompt = TREATMENT_PROMPT.format(
            cancer_type=cancer_type,
            stage=stage or "To be determined",
            tumor_size=tumor_size or "Unknown",
            biomarkers=json.dumps(biomarkers or {}),
            history=history,
        )
        return await self._generate_json(prompt, "treatment_plan", TreatmentPlan)

    async def chat(self, message: str) -> str:
        """Short answer from the model, or the keyword fallback."""
        if not message or not message.strip():
            return EMPTY_MESSAGE_ANSWER

        if self.client.is_available:
            response = await self.client.generate_async(
                f"The user's question is: {message}",
                system_instruction=CHAT_SYSTEM_INSTRUCTION,
                use_cache=False,
            )
            if response.success:
                return response.text
            logger.warning(f"Chatbot falling back to keyword answers: {response.error}")

        return fallback_answer(message)
