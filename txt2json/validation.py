"""
Checks an uploaded file before conversion.
Order is fixed (extension, content type, size) so the reported error is deterministic.
"""

from txt2json.config import DEFAULT_MAX_UPLOAD_BYTES
from txt2json.errors import RequestFailure
from txt2json.schemas import UploadedFile, ValidationOutcome

ALLOWED_EXTENSION = ".txt"
ALLOWED_CONTENT_TYPE = "text/plain"


def _extension(file_name: str) -> str:
    """Text from the last dot on, lower-cased; a bare ".txt" counts as extension ".txt"."""
    dot = file_name.rfind(".")
    return file_name[dot:].lower() if dot != -1 else ""


def validate(file: UploadedFile, max_size_bytes: int = DEFAULT_MAX_UPLOAD_BYTES) -> ValidationOutcome:
    """
    Validate extension, declared content type and size of an uploaded file.

    Returns a successful outcome, or a failed one with status 400
    (extension / content type) or 413 (size).
    """
    extension = _extension(file.file_name)
    if extension != ALLOWED_EXTENSION:
        return ValidationOutcome.failed(
            RequestFailure.INVALID_EXTENSION,
            f"Invalid file type. Only .txt files are allowed. Received: {extension or '(none)'}",
        )

    if file.declared_content_type.lower() != ALLOWED_CONTENT_TYPE:
        return ValidationOutcome.failed(
            RequestFailure.INVALID_CONTENT_TYPE,
            f"Invalid content type. Expected 'text/plain', received: {file.declared_content_type}",
        )

    if file.size > max_size_bytes:
        max_size_mb = max_size_bytes / (1024 * 1024)
        return ValidationOutcome.failed(
            RequestFailure.FILE_TOO_LARGE,
            f"File size exceeds maximum allowed size of {max_size_mb:.1f}MB",
            status_code=413,
        )

    return ValidationOutcome.success()
