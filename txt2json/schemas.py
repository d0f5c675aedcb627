"""
Pydantic models for the conversion pipeline.
These are the source of truth for the JSON shape: attributes are snake_case,
the wire format is camelCase.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from txt2json.errors import AuthError, RequestFailure


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """Render a UTC instant as YYYY-MM-DDTHH:MM:SS.fffZ."""
    moment = (moment or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UploadedFile(BaseModel):
    file_name: str
    content: bytes
    declared_content_type: str
    size: int


class AuthenticationOutcome(BaseModel):
    """Either success(username) or failed(kind, message)."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    username: Optional[str] = None
    error_message: Optional[str] = None
    failure: Optional[AuthError] = None

    @classmethod
    def success(cls, username: str) -> "AuthenticationOutcome":
        return cls(valid=True, username=username)

    @classmethod
    def failed(cls, failure: AuthError, message: str) -> "AuthenticationOutcome":
        return cls(valid=False, failure=failure, error_message=message)


class ValidationOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    valid: bool
    status_code: int = 200
    error_message: Optional[str] = None
    failure: Optional[RequestFailure] = None

    @classmethod
    def success(cls) -> "ValidationOutcome":
        return cls(valid=True)

    @classmethod
    def failed(cls, failure: RequestFailure, message: str, status_code: int = 400) -> "ValidationOutcome":
        return cls(valid=False, failure=failure, error_message=message, status_code=status_code)


class LineRecord(_WireModel):
    line_number: int = Field(ge=1)
    content: str
    length: int
    word_count: int
    is_empty: bool
    timestamp: str


class ProcessingMetadata(_WireModel):
    original_size: int
    content_type: str
    encoding: str = "UTF-8"
    processing_time_ms: float


class ConversionResult(_WireModel):
    success: bool = True
    correlation_id: str
    processed_at: str
    total_lines: int
    file_name: str
    data: list[LineRecord]
    metadata: ProcessingMetadata


class ErrorEnvelope(_WireModel):
    error: str
    message: str
    correlation_id: str
    timestamp: str = Field(default_factory=utc_timestamp)
