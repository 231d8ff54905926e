import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch, AsyncMock

from ogp_verify.api.main import app
from ogp_verify.api.v1.endpoints import rate_limiter
from ogp_verify.core.errors import InvalidTargetURL, OGPFetchError

client = TestClient(app)


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    rate_limiter.reset()
    yield
    rate_limiter.reset()


def test_root():
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "OGP Verification Service"


def test_health_check():
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["timestamp"]
    assert data["version"] == "1.0.0"


@patch("ogp_verify.api.v1.endpoints.ogp_service.verify", new_callable=AsyncMock)
def test_verify_ogp(mock_verify, sample_response, sample_payload):
    """
    Test the /ogp/verify endpoint with a mocked engine result.
    """
    mock_verify.return_value = sample_response

    response = client.post("/api/v1/ogp/verify", json={"url": "  https://example.com "})
    assert response.status_code == 200
    assert response.json() == sample_payload
    mock_verify.assert_awaited_once_with("https://example.com")


@patch("ogp_verify.api.v1.endpoints.ogp_service.verify", new_callable=AsyncMock)
def test_verify_blank_url(mock_verify):
    response = client.post("/api/v1/ogp/verify", json={"url": "   "})
    assert response.status_code == 400
    assert response.json()["detail"] == "URL is required"
    mock_verify.assert_not_awaited()


def test_verify_missing_body_field():
    response = client.post("/api/v1/ogp/verify", json={})
    assert response.status_code == 422


@patch("ogp_verify.api.v1.endpoints.ogp_service.verify", new_callable=AsyncMock)
def test_verify_invalid_target(mock_verify):
    mock_verify.side_effect = InvalidTargetURL("private IP addresses are not allowed")

    response = client.post("/api/v1/ogp/verify", json={"url": "http://127.0.0.1/"})
    assert response.status_code == 500
    assert response.json()["detail"] == "Error fetching OGP data: private IP addresses are not allowed"


@patch("ogp_verify.api.v1.endpoints.ogp_service.verify", new_callable=AsyncMock)
def test_verify_fetch_failure(mock_verify):
    mock_verify.side_effect = OGPFetchError("HTTP error: 404")

    response = client.post("/api/v1/ogp/verify", json={"url": "https://example.com/missing"})
    assert response.status_code == 500
    assert response.json()["detail"] == "Error fetching OGP data: HTTP error: 404"


@patch("ogp_verify.api.v1.endpoints.ogp_service.verify", new_callable=AsyncMock)
def test_rate_limit_per_client(mock_verify, sample_response):
    mock_verify.return_value = sample_response
    payload = {"url": "https://example.com"}
    headers = {"X-Forwarded-For": "203.0.113.7"}

    statuses = [
        client.post("/api/v1/ogp/verify", json=payload, headers=headers).status_code
        for _ in range(11)
    ]
    assert statuses == [200] * 10 + [429]

    other = client.post("/api/v1/ogp/verify", json=payload, headers={"X-Forwarded-For": "198.51.100.1"})
    assert other.status_code == 200


def test_cors_preflight():
    response = client.options(
        "/api/v1/ogp/verify",
        headers={
            "Origin": "https://frontend.example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
