"""
multipart/form-data body → UploadedFile.

Only the single-file upload used by the conversion endpoint is supported:
the first part with a filename wins and every other part is ignored.
Parsing is done by python-multipart, the parser FastAPI itself relies on.
"""

import logging
from typing import Optional

from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header

from txt2json.errors import MissingBoundaryError, NoFilePartError, UnsupportedContentTypeError
from txt2json.schemas import UploadedFile

logger = logging.getLogger(__name__)

ACCEPTED_CONTENT_TYPE = "text/plain"
_FILENAME_JUNK = "\"'; \t\r\n"


class _Part:
    def __init__(self) -> None:
        self.headers: dict[bytes, bytes] = {}
        self.data = bytearray()

    @property
    def filename(self) -> Optional[str]:
        disposition = self.headers.get(b"content-disposition")
        if disposition is None:
            return None
        kind, options = parse_options_header(disposition)
        if kind.strip().lower() != b"form-data":
            return None
        raw = options.get(b"filename")
        if raw is None:
            return None
        name = raw.decode("utf-8", errors="replace").strip(_FILENAME_JUNK)
        return name or None


class _FilePartCollector:
    """Callback sink for MultipartParser; stops buffering once a file part is complete."""

    def __init__(self) -> None:
        self.file_part: Optional[_Part] = None
        self._current: Optional[_Part] = None
        self._header_field = b""
        self._header_value = b""

    def callbacks(self) -> dict:
        return {
            "on_part_begin": self.on_part_begin,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_header_end": self.on_header_end,
        }

    def on_part_begin(self) -> None:
        self._current = _Part() if self.file_part is None else None

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        if self._current is not None:
            self._current.data += data[start:end]

    def on_part_end(self) -> None:
        if self._current is not None and self._current.filename:
            self.file_part = self._current
        self._current = None

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field += data[start:end]

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def on_header_end(self) -> None:
        if self._current is not None:
            self._current.headers[self._header_field.strip().lower()] = self._header_value.strip()
        self._header_field = b""
        self._header_value = b""


def extract(content_type_header: Optional[str], body: bytes) -> UploadedFile:
    """
    Pull the uploaded file out of a multipart/form-data request body.

    Raises:
        UnsupportedContentTypeError: header missing or not multipart/form-data.
        MissingBoundaryError:        no boundary parameter in the header.
        NoFilePartError:             no part with a filename, or a body the parser rejects.
    """
    if not content_type_header:
        raise UnsupportedContentTypeError("Missing Content-Type header. Expected multipart/form-data")

    media_type, params = parse_options_header(content_type_header)
    if media_type.strip().lower() != b"multipart/form-data":
        raise UnsupportedContentTypeError(
            f"Unsupported Content-Type '{media_type.decode('latin-1')}'. Expected multipart/form-data"
        )

    boundary = params.get(b"boundary")
    if not boundary:
        raise MissingBoundaryError("Missing boundary in multipart/form-data Content-Type header")

    collector = _FilePartCollector()
    parser = MultipartParser(boundary, collector.callbacks())
    try:
        parser.write(body)
        parser.finalize()
    except MultipartParseError as exc:
        logger.warning("Rejected malformed multipart body: %s", exc)
        raise NoFilePartError("No file found in request") from exc

    part = collector.file_part
    if part is None:
        raise NoFilePartError("No file found in request")

    content = bytes(part.data)
    logger.debug("Extracted file part '%s' (%d bytes)", part.filename, len(content))
    return UploadedFile(
        file_name=part.filename,
        content=content,
        declared_content_type=ACCEPTED_CONTENT_TYPE,
        size=len(content),
    )
