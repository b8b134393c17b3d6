"""Document handling: PDF text extraction and text utilities."""
from .text_extractor import (
    ExtractionResult,
    chunk_text,
    clean_medical_text,
    extract_text_from_pdf,
)

__all__ = ["ExtractionResult", "chunk_text", "clean_medical_text", "extract_text_from_pdf"]
