"""
Text file content → ConversionResult.

Every non-empty (after trimming) line becomes one LineRecord. Blank lines are
dropped and do not consume a line number, so numbering is always 1..N over
the kept lines.
"""

import logging
import time

from txt2json.errors import InternalFaultError
from txt2json.reader import read_text
from txt2json.schemas import ConversionResult, LineRecord, ProcessingMetadata, utc_timestamp

logger = logging.getLogger(__name__)


def count_words(line: str) -> int:
    """Tokens separated by single spaces, empty tokens discarded."""
    return sum(1 for token in line.split(" ") if token)


def build_records(text: str) -> list[LineRecord]:
    records: list[LineRecord] = []
    for segment in text.split("\n"):
        line = segment.strip()
        if not line:
            continue
        records.append(
            LineRecord(
                line_number=len(records) + 1,
                content=line,
                length=len(line),
                word_count=count_words(line),
                is_empty=False,
                timestamp=utc_timestamp(),
            )
        )
    return records


def convert(
    content: bytes,
    correlation_id: str,
    file_name: str = "",
    content_type: str = "text/plain",
) -> ConversionResult:
    """
    Convert raw file bytes into the structured JSON result.

    Args:
        content:        Raw bytes of the uploaded file.
        correlation_id: Request correlation ID, echoed in the result.
        file_name:      Name of the uploaded file.
        content_type:   Declared content type, reported in the metadata.

    Returns:
        ConversionResult with one LineRecord per non-empty line. Empty input
        yields a successful result with no records.

    Raises:
        InternalFaultError if content is not a bytes-like object.
    """
    if not isinstance(content, (bytes, bytearray, memoryview)):
        raise InternalFaultError(f"Expected bytes content, got {type(content).__name__}")

    started = time.perf_counter()
    logger.info("Starting file processing. CorrelationId: %s, FileName: %s", correlation_id, file_name)

    records = build_records(read_text(bytes(content)))
    elapsed_ms = (time.perf_counter() - started) * 1000.0

    logger.info(
        "File processing completed. CorrelationId: %s, LinesProcessed: %d, ProcessingTime: %.3fms",
        correlation_id, len(records), elapsed_ms,
    )
    return ConversionResult(
        success=True,
        correlation_id=correlation_id,
        processed_at=utc_timestamp(),
        total_lines=len(records),
        file_name=file_name,
        data=records,
        metadata=ProcessingMetadata(
            original_size=len(content),
            content_type=content_type,
            encoding="UTF-8",
            processing_time_ms=elapsed_ms,
        ),
    )
