"""
Integration tests for OpenAPI documentation.

Verifies OpenAPI schema is correctly generated for all endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from src.api.main import app


@pytest.fixture
def schema() -> dict:
    """Fetch the generated OpenAPI schema."""
    response = TestClient(app).get("/openapi.json")
    assert response.status_code == 200
    return response.json()


class TestOpenAPISchema:
    """Tests for OpenAPI schema generation."""

    def test_title_and_version(self, schema: dict) -> None:
        assert schema["info"]["title"] == "Authentication API"
        assert "Supabase" in schema["info"]["description"]
        assert schema["info"]["version"] == "0.1.0"

    @pytest.mark.parametrize(
        ("path", "method"),
        [
            ("/api/v1/auth/register", "post"),
            ("/api/v1/auth/verify-otp", "post"),
            ("/api/v1/auth/resend-otp", "post"),
            ("/api/v1/auth/health", "get"),
        ],
    )
    def test_endpoint_documented(self, schema: dict, path: str, method: str) -> None:
        assert method in schema["paths"][path]

    def test_register_documents_conflict(self, schema: dict) -> None:
        responses = schema["paths"]["/api/v1/auth/register"]["post"]["responses"]
        assert "409" in responses
        assert "400" in responses

    def test_resend_documents_rate_limit(self, schema: dict) -> None:
        responses = schema["paths"]["/api/v1/auth/resend-otp"]["post"]["responses"]
        assert "429" in responses

    def test_register_request_schema(self, schema: dict) -> None:
        register = schema["components"]["schemas"]["RegisterRequest"]
        assert set(register["required"]) == {"firstname", "lastname", "email", "password"}
        assert register["properties"]["password"]["minLength"] == 8

    def test_verify_request_token_pattern(self, schema: dict) -> None:
        token = schema["components"]["schemas"]["VerifyOtpRequest"]["properties"]["token"]
        assert token["pattern"] == r"^[0-9]{6}$"

    def test_error_response_schema_uses_camel_case(self, schema: dict) -> None:
        error = schema["components"]["schemas"]["ErrorResponse"]
        assert "statusCode" in error["properties"]
