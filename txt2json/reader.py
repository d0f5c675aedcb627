"""
Uploaded bytes → text. Best-effort UTF-8: malformed sequences become U+FFFD
instead of failing the request, and a leading byte order mark is dropped.
"""


def read_text(file_bytes: bytes) -> str:
    """Decode file content as UTF-8 without ever raising."""
    return file_bytes.decode("utf-8-sig", errors="replace")
