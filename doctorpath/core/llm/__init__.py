"""
LLM layer: Gemini client and the oncology assistant built on it.
"""
from .gemini_client import GeminiClient, GeminiConfig, GeminiResponse
from .oncology_assistant import (
    KnowledgeGraph,
    MedicalEntities,
    OncologyAssistant,
    TreatmentPlan,
    fallback_answer,
)

__all__ = [
    "GeminiClient",
    "GeminiConfig",
    "GeminiResponse",
    "KnowledgeGraph",
    "MedicalEntities",
    "OncologyAssistant",
    "TreatmentPlan",
    "fallback_answer",
]
