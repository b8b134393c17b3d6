"""
Medical file upload handling.

Stores an uploaded file under the configured upload directory with a
unique name, enforcing the allowed extensions and the size limit, and
extracts text from PDFs.
"""
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from doctorpath.config import settings
from doctorpath.core.documents import extract_text_from_pdf
from doctorpath.utils import DocumentError, get_logger

logger = get_logger(__name__)

ALLOWED_EXTENSIONS = frozenset({".pdf", ".png", ".jpg", ".jpeg", ".dcm"})
CHUNK_SIZE = 1024 * 1024


@dataclass
class StoredUpload:
    original_name: str
    file_type: str  # extension without the dot
    path: Path
    size: int
    content_type: Optional[str] = None
    extracted_text: Optional[str] = None
    extraction_error: Optional[str] = None


def file_type_for(file_name: str) -> str:
    """Lower-case extension without the dot; raises for disallowed types."""
    ext = Path(file_name).suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise DocumentError(
            "Invalid file type",
            file_name=file_name,
            details={"allowed": sorted(ALLOWED_EXTENSIONS)},
        )
    return ext.lstrip(".")


def unique_file_name(original_name: str) -> str:
    """`<epoch-ms>-<random>-<original base name>`"""
    base = Path(original_name).name.replace(" ", "_")
    return f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}-{base}"


async def store_upload(
    upload: UploadFile,
    upload_dir: Optional[str] = None,
    max_bytes: Optional[int] = None,
) -> StoredUpload:
    """
    Write `upload` to disk and extract PDF text.

    Raises:
        DocumentError: missing name, disallowed type or file over the size limit
    """
    if not upload.filename:
        raise DocumentError("No file uploaded")

    file_type = file_type_for(upload.filename)
    limit = max_bytes if max_bytes is not None else settings.max_upload_bytes
    target_dir = Path(upload_dir or settings.upload_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / unique_file_name(upload.filename)

    size = 0
    try:
        with open(path, "wb") as out:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > limit:
                    raise DocumentError(
                        f"File exceeds the {limit // (1024 * 1024)} MB limit",
                        file_name=upload.filename,
                        details={"max_bytes": limit},
                    )
                out.write(chunk)
    except Exception:
        path.unlink(missing_ok=True)
        raise

    stored = StoredUpload(
        original_name=upload.filename,
        file_type=file_type,
        path=path,
        size=size,
        content_type=upload.content_type,
    )

    if file_type == "pdf":
        extraction = await run_in_threadpool(extract_text_from_pdf, path)
        if extraction.success:
            stored.extracted_text = extraction.text or None
        else:
            stored.extraction_error = extraction.error

    logger.info(f"Stored upload {path.name} ({size} bytes, type={file_type})")
    return stored


def discard_upload(stored: StoredUpload) -> None:
    """Remove a stored file whose database record was never written."""
    stored.path.unlink(missing_ok=True)
    logger.warning(f"Discarded upload {stored.path.name}")
