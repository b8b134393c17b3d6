"""
Utilities Package - Logging and Exception Handling
"""
from .logging import get_logger, setup_logging
from .exceptions import (
    DoctorPathError,
    AuthenticationError,
    PermissionDeniedError,
    NotFoundError,
    ConflictError,
    InvalidRequestError,
    DocumentError,
    LLMUnavailableError,
    LLMResponseError,
    ReportGenerationError,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "DoctorPathError",
    "AuthenticationError",
    "PermissionDeniedError",
    "NotFoundError",
    "ConflictError",
    "InvalidRequestError",
    "DocumentError",
    "LLMUnavailableError",
    "LLMResponseError",
    "ReportGenerationError",
]
