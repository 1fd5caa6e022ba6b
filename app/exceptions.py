# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error carries a machine-readable code and, where possible, a hint on
# how to fix the request.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class LinkBioException(Exception):
    """
    Base exception for the LinkBio API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "LINKBIO_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Lookup Exceptions
# =============================================================================

class SectionNotFoundError(LinkBioException):
    """Raised when a section ID doesn't exist or belongs to someone else."""

    def __init__(self, section_id: str):
        super().__init__(
            message=f"Section not found: {section_id}",
            code="SECTION_NOT_FOUND",
            status_code=404,
            suggestion="Check that the section_id is correct and the section hasn't been deleted",
            details={"section_id": section_id}
        )


class LinkNotFoundError(LinkBioException):
    """Raised when a link ID doesn't exist."""

    def __init__(self, link_id: str):
        super().__init__(
            message=f"Link not found: {link_id}",
            code="LINK_NOT_FOUND",
            status_code=404,
            suggestion="Check that the link_id is correct",
            details={"link_id": link_id}
        )


class PhotoNotFoundError(LinkBioException):
    """Raised when a photo ID doesn't exist."""

    def __init__(self, photo_id: str):
        super().__init__(
            message=f"Photo not found: {photo_id}",
            code="PHOTO_NOT_FOUND",
            status_code=404,
            suggestion="Check that the photo_id is correct",
            details={"photo_id": photo_id}
        )


class TestimonialNotFoundError(LinkBioException):
    """Raised when a testimonial ID doesn't exist."""

    def __init__(self, testimonial_id: str):
        super().__init__(
            message=f"Testimonial not found: {testimonial_id}",
            code="TESTIMONIAL_NOT_FOUND",
            status_code=404,
            suggestion="Check that the testimonial_id is correct",
            details={"testimonial_id": testimonial_id}
        )


class ProfileNotFoundError(LinkBioException):
    """Raised when no profile matches a user ID or public username."""

    def __init__(self, key: str):
        super().__init__(
            message=f"Profile not found: {key}",
            code="PROFILE_NOT_FOUND",
            status_code=404,
            suggestion="Check the username in the URL",
            details={"profile": key}
        )


# =============================================================================
# Section / Membership Exceptions
# =============================================================================

class SectionKindMismatchError(LinkBioException):
    """Raised when an operation doesn't apply to the section's kind."""

    def __init__(self, section_id: str, kind: str, operation: str):
        super().__init__(
            message=f"Section {section_id} of kind '{kind}' does not support {operation}",
            code="SECTION_KIND_MISMATCH",
            status_code=400,
            suggestion="Use a section of the matching kind for this operation",
            details={"section_id": section_id, "kind": kind, "operation": operation}
        )


class InvalidReorderError(LinkBioException):
    """Raised when a new order is not a permutation of the current members."""

    def __init__(self, container_id: str, missing: list[str], unexpected: list[str]):
        super().__init__(
            message=f"New order for {container_id} must list every current item exactly once",
            code="INVALID_REORDER",
            status_code=400,
            suggestion="Reload the list and submit all of its ids in the new order",
            details={
                "container_id": container_id,
                "missing": missing,
                "unexpected": unexpected,
            }
        )


class CommitFailedError(LinkBioException):
    """
    Raised when a multi-step membership save stops part-way.

    Steps that already ran are not rolled back; `details.journal` lists which
    steps were applied, which one failed and which never ran.
    """

    def __init__(self, container_id: str, error: str, journal: list[dict[str, Any]]):
        super().__init__(
            message=f"Failed to save order for {container_id}: {error}",
            code="COMMIT_FAILED",
            status_code=502,
            suggestion="Retry the save; steps already applied will not be repeated",
            details={"container_id": container_id, "error": error, "journal": journal}
        )


# =============================================================================
# Profile Exceptions
# =============================================================================

class InvalidUsernameError(LinkBioException):
    """Raised when a username doesn't match the allowed pattern."""

    def __init__(self, username: str):
        super().__init__(
            message=f"Invalid username: {username}",
            code="INVALID_USERNAME",
            status_code=400,
            suggestion="Use 3-20 lowercase letters, digits, hyphens (-) or underscores (_)",
            details={"username": username}
        )


class UsernameTakenError(LinkBioException):
    """Raised when a username is already used by another profile."""

    def __init__(self, username: str):
        super().__init__(
            message=f"Username already taken: {username}",
            code="USERNAME_TAKEN",
            status_code=409,
            suggestion="Pick another username",
            details={"username": username}
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidFileTypeError(LinkBioException):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            message=f"Invalid file type: {filename}",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"filename": filename, "allowed_types": allowed}
        )


class FileTooLargeError(LinkBioException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": size_mb, "max_mb": max_mb}
        )


class StorageUploadError(LinkBioException):
    """Raised when file upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to upload file to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error}
        )


class DatabaseWriteError(LinkBioException):
    """Raised when a single-table write to the database fails."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            message=f"Failed to {operation}: {error}",
            code="DATABASE_WRITE_ERROR",
            status_code=502,
            suggestion="Try again; nothing was retried automatically",
            details={"operation": operation, "error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def linkbio_exception_handler(
    request: Request,
    exc: LinkBioException
) -> JSONResponse:
    """
    Convert LinkBioException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle Pydantic validation errors raised outside request parsing.
    """
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": str(exc)
        }
    )
