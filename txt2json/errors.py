"""
Error taxonomy for the conversion pipeline.

Authentication and validation failures are reported as outcome values
carrying one of the enum kinds below. Multipart extraction and secret store
failures are raised as exceptions and mapped to responses by the handler.
"""

from enum import Enum


class AuthError(str, Enum):
    MISSING_HEADER = "MissingHeader"
    MALFORMED_SCHEME = "MalformedScheme"
    MALFORMED_ENCODING = "MalformedEncoding"
    MALFORMED_CREDENTIALS = "MalformedCredentials"
    CREDENTIAL_STORE_UNAVAILABLE = "CredentialStoreUnavailable"
    INVALID_CREDENTIALS = "InvalidCredentials"


class RequestFailure(str, Enum):
    UNSUPPORTED_CONTENT_TYPE = "UnsupportedContentType"
    MISSING_BOUNDARY = "MissingBoundary"
    NO_FILE_PART = "NoFilePart"
    INVALID_EXTENSION = "InvalidExtension"
    INVALID_CONTENT_TYPE = "InvalidContentType"
    FILE_TOO_LARGE = "FileTooLarge"


class RequestError(Exception):
    """Base class for problems with the uploaded request itself."""

    kind: RequestFailure
    status_code: int = 400


class UnsupportedContentTypeError(RequestError):
    kind = RequestFailure.UNSUPPORTED_CONTENT_TYPE


class MissingBoundaryError(RequestError):
    kind = RequestFailure.MISSING_BOUNDARY


class NoFilePartError(RequestError):
    kind = RequestFailure.NO_FILE_PART


class ProcessingError(Exception):
    """Base class for failures while converting an accepted file."""


class DecodeFailureError(ProcessingError):
    """Reserved. Decoding is best-effort and never raises this."""


class InternalFaultError(ProcessingError):
    pass


class SecretStoreError(Exception):
    """Raised when the secret store cannot be reached or answers with an error."""
