"""
Orchestrates one conversion request:
  authenticate → extract → validate → convert → respond

Each stage can short-circuit into an ErrorEnvelope. The correlation ID made
at entry is attached to every response, success or error.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from txt2json.config import Settings
from txt2json.errors import RequestError
from txt2json.schemas import ErrorEnvelope
from txt2json.services import converter, extractor
from txt2json.services.authenticator import Authenticator
from txt2json.validation import validate

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
GENERIC_FAILURE_MESSAGE = "An unexpected error occurred while processing your request"

_ERROR_CATEGORIES = {
    400: "Bad Request",
    401: "Unauthorized",
    413: "Payload Too Large",
    500: "Internal Server Error",
}


@dataclass
class HandlerResponse:
    status_code: int
    body: dict
    headers: dict = field(default_factory=dict)


class ConversionHandler:
    def __init__(self, authenticator: Authenticator, settings: Settings) -> None:
        self._authenticator = authenticator
        self._max_upload_bytes = settings.max_upload_bytes

    async def handle(self, authorization: Optional[str], content_type: Optional[str], body: bytes) -> HandlerResponse:
        correlation_id = str(uuid.uuid4())
        started = time.perf_counter()
        logger.info("ConvertTextToJson started. CorrelationId: %s", correlation_id)

        try:
            auth = await self._authenticator.authenticate(authorization or "")
            if not auth.valid:
                logger.warning(
                    "Authentication failed. CorrelationId: %s, Reason: %s", correlation_id, auth.error_message
                )
                return _error(401, auth.error_message or "Unauthorized", correlation_id)
            logger.info("Authentication successful. CorrelationId: %s, User: %s", correlation_id, auth.username)

            try:
                upload = extractor.extract(content_type, body)
            except RequestError as exc:
                logger.warning(
                    "Failed to parse file from request. CorrelationId: %s, Reason: %s (%s)",
                    correlation_id, exc, exc.kind.value,
                )
                return _error(exc.status_code, str(exc), correlation_id)

            outcome = validate(upload, self._max_upload_bytes)
            if not outcome.valid:
                logger.warning(
                    "File validation failed. CorrelationId: %s, Reason: %s", correlation_id, outcome.error_message
                )
                return _error(outcome.status_code, outcome.error_message or "Invalid file", correlation_id)

            result = await run_in_threadpool(
                converter.convert, upload.content, correlation_id, upload.file_name, upload.declared_content_type
            )
        except Exception:
            logger.exception("Unexpected error in ConvertTextToJson. CorrelationId: %s", correlation_id)
            return _error(500, GENERIC_FAILURE_MESSAGE, correlation_id)

        logger.info(
            "ConvertTextToJson completed successfully. CorrelationId: %s, ProcessingTime: %.3fms",
            correlation_id, (time.perf_counter() - started) * 1000.0,
        )
        return HandlerResponse(
            status_code=200,
            body=result.model_dump(by_alias=True, mode="json"),
            headers={CORRELATION_HEADER: correlation_id},
        )


def _error(status_code: int, message: str, correlation_id: str) -> HandlerResponse:
    envelope = ErrorEnvelope(
        error=_ERROR_CATEGORIES.get(status_code, "Error"),
        message=message,
        correlation_id=correlation_id,
    )
    return HandlerResponse(
        status_code=status_code,
        body=envelope.model_dump(by_alias=True, mode="json"),
        headers={CORRELATION_HEADER: correlation_id},
    )
