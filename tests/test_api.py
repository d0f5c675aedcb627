"""
End-to-end tests for POST /v1/convert/text-to-json.
"""

import uuid
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from conftest import FakeSecretStore, basic_header, multipart_body, multipart_content_type
from txt2json.main import create_app
from txt2json.services import handler as handler_module

URL = "/v1/convert/text-to-json"


@pytest.fixture
def client(settings, store):
    with TestClient(create_app(settings=settings, secret_store=store)) as test_client:
        yield test_client


def post(client, body, auth=None, content_type=None):
    headers = {"Content-Type": content_type or multipart_content_type()}
    if auth is not None:
        headers["Authorization"] = auth
    return client.post(URL, content=body, headers=headers)


def assert_error(response, status, category):
    assert response.status_code == status
    payload = response.json()
    assert payload["error"] == category
    assert set(payload) == {"error", "message", "correlationId", "timestamp"}
    assert response.headers["x-correlation-id"] == payload["correlationId"]
    uuid.UUID(payload["correlationId"])
    return payload


def test_root(client):
    assert client.get("/").json() == {"message": "txt2json is running"}


def test_successful_conversion(client):
    body = multipart_body(b"Line 1: Test content\nLine 2: More test content", filename="test-file.txt")
    response = post(client, body, auth=basic_header())

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    payload = response.json()
    assert payload["success"] is True
    assert payload["totalLines"] == 2
    assert payload["fileName"] == "test-file.txt"
    assert payload["data"][0] == {
        "lineNumber": 1,
        "content": "Line 1: Test content",
        "length": 20,
        "wordCount": 4,
        "isEmpty": False,
        "timestamp": payload["data"][0]["timestamp"],
    }
    assert payload["metadata"]["originalSize"] == 46
    assert payload["metadata"]["contentType"] == "text/plain"
    assert payload["metadata"]["encoding"] == "UTF-8"
    assert isinstance(payload["metadata"]["processingTimeMs"], float)
    assert response.headers["x-correlation-id"] == payload["correlationId"]


def test_round_trip_reproduces_trimmed_content(client):
    lines = ["first line", "  indented second  ", "", "third\tline with tab"]
    response = post(client, multipart_body("\n".join(lines).encode()), auth=basic_header())
    payload = response.json()
    assert [item["content"] for item in payload["data"]] == [line.strip() for line in lines if line.strip()]
    assert payload["fileName"] == "test.txt"


def test_empty_file(client):
    response = post(client, multipart_body(b""), auth=basic_header())
    assert response.status_code == 200
    assert response.json()["totalLines"] == 0
    assert response.json()["data"] == []


@pytest.mark.parametrize(
    "body",
    [b"", b"garbage", multipart_body(b"x", filename="evil.exe")],
)
def test_missing_auth_is_unauthorized_regardless_of_body(client, body):
    assert_error(post(client, body), 401, "Unauthorized")


def test_wrong_password(client):
    payload = assert_error(post(client, multipart_body(b"x"), auth=basic_header(password="nope")), 401, "Unauthorized")
    assert payload["message"] == "Invalid credentials"


def test_malformed_auth(client):
    assert_error(post(client, multipart_body(b"x"), auth="Basic %%%"), 401, "Unauthorized")


def test_non_ascii_auth_header_is_unauthorized(client):
    response = client.post(
        URL,
        content=multipart_body(b"x"),
        headers={"Content-Type": multipart_content_type(), "Authorization": b"Basic \xc3\xa9\xc3\xa9"},
    )
    assert_error(response, 401, "Unauthorized")


def test_store_outage_is_unauthorized(settings):
    with TestClient(create_app(settings=settings, secret_store=FakeSecretStore(fail=True))) as client:
        assert_error(post(client, multipart_body(b"x"), auth=basic_header()), 401, "Unauthorized")


def test_not_multipart(client):
    assert_error(post(client, b"{}", auth=basic_header(), content_type="application/json"), 400, "Bad Request")


def test_missing_boundary(client):
    assert_error(
        post(client, multipart_body(b"x"), auth=basic_header(), content_type="multipart/form-data"),
        400,
        "Bad Request",
    )


def test_no_file_part(client):
    payload = assert_error(
        post(client, multipart_body(b"x", filename=None), auth=basic_header()), 400, "Bad Request"
    )
    assert payload["message"] == "No file found in request"


def test_invalid_extension(client):
    payload = assert_error(
        post(client, multipart_body(b"x", filename="report.md"), auth=basic_header()), 400, "Bad Request"
    )
    assert ".md" in payload["message"]


def test_file_too_large(client):
    content = b"a" * (10 * 1024 * 1024 + 1)
    assert_error(post(client, multipart_body(content), auth=basic_header()), 413, "Payload Too Large")


def test_file_at_limit_is_accepted(client):
    content = b"a" * (10 * 1024 * 1024)
    response = post(client, multipart_body(content), auth=basic_header())
    assert response.status_code == 200
    assert response.json()["metadata"]["originalSize"] == 10 * 1024 * 1024


def test_unexpected_failure_is_generic_500(client, caplog):
    with patch.object(handler_module.converter, "convert", side_effect=RuntimeError("/srv/secret/path exploded")):
        payload = assert_error(post(client, multipart_body(b"x"), auth=basic_header()), 500, "Internal Server Error")
    assert "/srv/secret/path" not in payload["message"]
    assert "exploded" in caplog.text


def test_each_request_gets_its_own_correlation_id(client):
    first = post(client, multipart_body(b"x"), auth=basic_header())
    second = post(client, multipart_body(b"x"))
    assert first.headers["x-correlation-id"] != second.headers["x-correlation-id"]
