"""
Custom Exception Hierarchy

Provides specific exception types for different error categories
with structured error information. Every error carries the HTTP status
the API layer answers with.
"""
from typing import Optional, Dict, Any


class DoctorPathError(Exception):
    """Base exception for all DoctorPath errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "success": False,
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class AuthenticationError(DoctorPathError):
    """Missing, expired or invalid credentials."""

    status_code = 401

    def __init__(self, message: str = "Not authenticated", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="NOT_AUTHENTICATED", details=details)


class PermissionDeniedError(DoctorPathError):
    """Authenticated actor is not allowed to touch the resource."""

    status_code = 403

    def __init__(self, message: str = "Access denied", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="ACCESS_DENIED", details=details)


class NotFoundError(DoctorPathError):
    """A referenced record does not exist."""

    status_code = 404

    def __init__(
        self,
        message: str,
        resource: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="NOT_FOUND",
            details={"resource": resource, **(details or {})}
        )
        self.resource = resource


class ConflictError(DoctorPathError):
    """The request conflicts with the current state of a record."""

    status_code = 409

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="CONFLICT", details=details)


class InvalidRequestError(DoctorPathError):
    """A request is well-formed but cannot be served as asked."""

    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="INVALID_REQUEST", details=details)


class DocumentError(DoctorPathError):
    """Errors while accepting or reading uploaded documents."""

    status_code = 400

    def __init__(
        self,
        message: str,
        file_name: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="DOCUMENT_ERROR",
            details={"file_name": file_name, **(details or {})}
        )
        self.file_name = file_name


class LLMUnavailableError(DoctorPathError):
    """The generative model is not configured or could not be reached."""

    status_code = 503

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="LLM_UNAVAILABLE", details=details)


class LLMResponseError(DoctorPathError):
    """The generative model answered with something we cannot use."""

    status_code = 502

    def __init__(
        self,
        message: str,
        task: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="LLM_RESPONSE_ERROR",
            details={"task": task, **(details or {})}
        )
        self.task = task


class ReportGenerationError(DoctorPathError):
    """Errors during report generation."""

    def __init__(
        self,
        message: str,
        report_type: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="REPORT_ERROR",
            details={"report_type": report_type, **(details or {})}
        )
        self.report_type = report_type
