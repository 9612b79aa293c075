"""Tests for RFC 7807 error handling."""

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from apps.api.core.errors import (
    PayloadTooLargeError,
    ingestion_status,
    register_error_handlers,
)
from packages.ingestion_engine.errors import (
    DecodeFailure,
    EmptyDataset,
    IngestionError,
    UnsupportedFormat,
)


@pytest.fixture
def error_app():
    """Create a test app with error handlers registered."""
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/test/unsupported")
    async def raise_unsupported():
        raise UnsupportedFormat(".txt", (".csv", ".xlsx"))

    @app.get("/test/empty")
    async def raise_empty():
        raise EmptyDataset("CSV file")

    @app.get("/test/decode")
    async def raise_decode():
        raise DecodeFailure("Excel file", ValueError("Password required"))

    @app.get("/test/too-large")
    async def raise_too_large():
        raise PayloadTooLargeError(10 * 1024 * 1024)

    @app.get("/test/http")
    async def raise_http():
        raise HTTPException(status_code=404, detail="Nothing here")

    @app.get("/test/unhandled")
    async def raise_unhandled():
        raise RuntimeError("Unexpected crash")

    return app


@pytest.fixture
def client(error_app):
    return TestClient(error_app, raise_server_exceptions=False)


class TestRFC7807ErrorFormat:
    """All errors should return RFC 7807 Problem Details format."""

    def test_unsupported_format_returns_415(self, client):
        response = client.get("/test/unsupported")
        assert response.status_code == 415
        body = response.json()
        assert body["type"] == "about:blank"
        assert body["title"] == "Unsupported Media Type"
        assert body["status"] == 415
        assert body["detail"] == "Unsupported file type .txt. Accepted: .csv, .xlsx"
        assert body["instance"] == "/test/unsupported"

    def test_empty_dataset_returns_422(self, client):
        response = client.get("/test/empty")
        assert response.status_code == 422
        body = response.json()
        assert body["title"] == "Unprocessable Entity"
        assert body["detail"].startswith("No data found in CSV file")

    def test_decode_failure_returns_400(self, client):
        response = client.get("/test/decode")
        assert response.status_code == 400
        assert response.json()["detail"] == "Failed to parse Excel file: Password required"

    def test_payload_too_large_returns_413(self, client):
        response = client.get("/test/too-large")
        assert response.status_code == 413
        body = response.json()
        assert body["title"] == "Payload Too Large"
        assert body["detail"] == "File too large (max 10MB)"

    def test_http_exception_returns_rfc7807(self, client):
        response = client.get("/test/http")
        assert response.status_code == 404
        body = response.json()
        assert body["title"] == "Not Found"
        assert body["detail"] == "Nothing here"

    def test_unhandled_error_returns_rfc7807(self, client):
        response = client.get("/test/unhandled")
        assert response.status_code == 500
        body = response.json()
        assert body["title"] == "Internal Server Error"
        assert body["detail"] == "An unexpected error occurred"


def test_unknown_ingestion_error_is_bad_request():
    assert ingestion_status(IngestionError("something odd")) == 400
