"""
Tests for the application shell: health probes, headers and error bodies.
"""
import json

import pytest
from limits import parse

from app.config import settings
from app.core.errors import (
    ApiError, ErrorCode, UpstreamError, code_for_status, code_for_upstream_status, error_body
)
from app.core.rate_limit import limiter
from tests.conftest import StubProvider


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/ready").json() == {"status": "ready"}


def test_security_headers(client):
    response = client.get("/")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


def test_unknown_route_uses_error_shape(client):
    response = client.get("/api/v1/nowhere")

    assert response.status_code == 404
    assert response.json() == {"error": {"message": "Not Found", "code": "NOT_FOUND"}}


def test_unhandled_exception(client, db):
    db.respond("project_ideas", error=RuntimeError("database exploded"))

    response = client.get("/api/v1/ideas")

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "UNKNOWN_ERROR"


class TestErrorMapping:

    @pytest.mark.parametrize("code, status_code", [
        (ErrorCode.AUTH_ERROR, 401),
        (ErrorCode.INVALID_INPUT, 400),
        (ErrorCode.CONFIG_ERROR, 400),
        (ErrorCode.MISSING_CONFIG, 400),
        (ErrorCode.NOT_FOUND, 404),
        (ErrorCode.RATE_LIMIT, 429),
        (ErrorCode.UPSTREAM_ERROR, 502),
        (ErrorCode.UNKNOWN_ERROR, 500),
    ])
    def test_api_error_status(self, code, status_code):
        assert ApiError("x", code).status_code == status_code

    def test_http_status_codes(self):
        assert code_for_status(403) == ErrorCode.AUTH_ERROR
        assert code_for_status(422) == ErrorCode.INVALID_INPUT
        assert code_for_status(504) == ErrorCode.UPSTREAM_ERROR
        assert code_for_status(500) == ErrorCode.UNKNOWN_ERROR

    def test_upstream_status_codes(self):
        assert code_for_upstream_status(401) == ErrorCode.AUTH_ERROR
        assert code_for_upstream_status(429) == ErrorCode.RATE_LIMIT
        assert code_for_upstream_status(None) == ErrorCode.UPSTREAM_ERROR

    def test_upstream_error_conversion(self):
        api_error = UpstreamError("OpenAI", "OpenAI API error: quota", status_code=429).to_api_error()
        assert (api_error.code, api_error.status_code) == (ErrorCode.RATE_LIMIT, 429)

        api_error = UpstreamError("OpenAI", "OpenAI API error: bad key", status_code=401).to_api_error()
        assert (api_error.code, api_error.status_code) == (ErrorCode.AUTH_ERROR, 502)

    def test_details_hidden_in_production(self, settings_override):
        settings_override(environment="development")
        assert error_body("x", ErrorCode.INVALID_INPUT, ["d"])["error"]["details"] == ["d"]

        settings_override(environment="production")
        assert error_body("x", ErrorCode.INVALID_INPUT, ["d"]) == {"error": {"message": "x", "code": "INVALID_INPUT"}}


@pytest.fixture
def rate_limiting(client):
    limiter.enabled = True
    limiter.reset()
    yield limiter
    limiter.reset()
    limiter.enabled = False


def test_generation_rate_limit(client, use_generator, rate_limiting):
    use_generator(openai=StubProvider("OpenAI", json.dumps([{"title": "Step Counter"}])))
    payload = {"domain": "Health", "difficulty": "beginner"}
    allowed = parse(settings.generation_rate_limit).amount

    for _ in range(allowed):
        assert client.post("/api/v1/ideas/generate", json=payload).status_code == 200

    response = client.post("/api/v1/ideas/generate", json=payload)

    assert response.status_code == 429
    assert response.json()["error"]["code"] == "RATE_LIMIT"
    for _ in range(allowed + 1):
        assert client.get("/health").status_code == 200
    assert client.get("/api/v1/projects").status_code == 200
