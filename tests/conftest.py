"""
Shared fixtures: an in-memory secret store and multipart body builder.
"""

import base64
from typing import Optional

import pytest

from txt2json.config import SecretStoreConfig, Settings
from txt2json.errors import SecretStoreError

USERNAME = "apiuser"
PASSWORD = "SecurePassword123!"
BOUNDARY = "----txt2jsonTestBoundary7MA4YWxkTrZu0gW"


class FakeSecretStore:
    def __init__(self, secrets: Optional[dict] = None, fail: bool = False) -> None:
        self.secrets = {"api-username": USERNAME, "api-password": PASSWORD} if secrets is None else secrets
        self.fail = fail
        self.calls: list[str] = []

    async def get_secret(self, name: str) -> Optional[str]:
        self.calls.append(name)
        if self.fail:
            raise SecretStoreError("store down")
        return self.secrets.get(name)

    async def close(self) -> None:
        pass


def basic_header(username: str = USERNAME, password: str = PASSWORD) -> str:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def multipart_body(
    content: bytes,
    filename: Optional[str] = "test.txt",
    boundary: str = BOUNDARY,
    part_content_type: str = "text/plain",
    extra_fields: Optional[dict] = None,
) -> bytes:
    chunks = []
    for name, value in (extra_fields or {}).items():
        chunks.append(
            f"--{boundary}\r\nContent-Disposition: form-data; name=\"{name}\"\r\n\r\n{value}\r\n".encode("utf-8")
        )
    disposition = 'form-data; name="file"'
    if filename is not None:
        disposition += f'; filename="{filename}"'
    chunks.append(
        f"--{boundary}\r\nContent-Disposition: {disposition}\r\nContent-Type: {part_content_type}\r\n\r\n".encode(
            "utf-8"
        )
        + content
        + b"\r\n"
    )
    chunks.append(f"--{boundary}--\r\n".encode("utf-8"))
    return b"".join(chunks)


def multipart_content_type(boundary: str = BOUNDARY) -> str:
    return f"multipart/form-data; boundary={boundary}"


@pytest.fixture
def store() -> FakeSecretStore:
    return FakeSecretStore()


@pytest.fixture
def settings() -> Settings:
    return Settings(secret_store=SecretStoreConfig(backend="env"))
