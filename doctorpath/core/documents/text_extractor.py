"""
Medical Document Text Extraction

Pulls plain text out of uploaded PDF reports with pypdf and provides the
small text utilities used before the text is sent to the assistant.
Extraction never raises: a PDF that cannot be read still uploads, just
without extracted text.
"""
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pypdf import PdfReader

from doctorpath.utils import get_logger

logger = get_logger(__name__)

DEFAULT_CHUNK_SIZE = 1000
DEFAULT_CHUNK_OVERLAP = 200

_WHITESPACE_RE = re.compile(r"\s+")
# Anything outside word characters, whitespace and common clinical punctuation
_DISALLOWED_RE = re.compile(r"[^\w\s.,;:()\[\]{}<>+\-*/=%@#$&|^~`'\"!?]")


@dataclass
class ExtractionResult:
    """Outcome of a PDF extraction attempt."""
    success: bool
    text: Optional[str] = None
    page_count: Optional[int] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "text": self.text,
            "page_count": self.page_count,
            "error": self.error,
        }


def extract_text_from_pdf(pdf_path: Union[str, Path]) -> ExtractionResult:
    """
    Extract the text of every page of a PDF.

    Args:
        pdf_path: Path to the PDF on disk

    Returns:
        ExtractionResult; on failure success is False and error is set.
    """
    try:
        reader = PdfReader(str(pdf_path))
        pages = [page.extract_text() or "" for page in reader.pages]
        text = "\n".join(pages)
        logger.info(f"Extracted {len(text)} chars from {len(pages)} page(s): {Path(pdf_path).name}")
        return ExtractionResult(success=True, text=text, page_count=len(pages))
    except Exception as e:
        logger.warning(f"PDF extraction failed for {pdf_path}: {e}")
        return ExtractionResult(success=False, error=f"PDF extraction failed: {e}")


def chunk_text(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> List[str]:
    """
    Split text into windows of `chunk_size` characters, each starting
    `chunk_size - overlap` characters after the previous one. The last
    window ends at the end of the text.
    """
    assert 0 <= overlap < chunk_size, (chunk_size, overlap)

    chunks: List[str] = []
    start = 0
    while start < len(text):
        end = min(start + chunk_size, len(text))
        chunks.append(text[start:end])
        if end >= len(text):
            break
        start = end - overlap
    return chunks


def clean_medical_text(text: str) -> str:
    """Collapse whitespace and blank out stray symbols (bullets, box glyphs)."""
    text = _WHITESPACE_RE.sub(" ", text)
    text = _DISALLOWED_RE.sub(" ", text)
    return text.strip()
