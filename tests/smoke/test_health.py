# tests/smoke/test_health.py
import pytest
from fastapi.testclient import TestClient

from apps.api.main import create_app


@pytest.fixture(scope="module")
def api_client():
    with TestClient(create_app()) as client:
        yield client


def test_api_liveness(api_client):
    """Checks that the API service is up."""
    response = api_client.get("/health/live")
    assert response.status_code == 200
    assert response.json() == {"status": "up"}


def test_api_service_info(api_client):
    response = api_client.get("/")
    assert response.status_code == 200
    assert response.json()["service"] == "taxdesk-api"


def test_api_generates_request_id(api_client):
    response = api_client.get("/health/live")
    assert response.headers["x-request-id"].startswith("req_")


def test_api_unknown_route_returns_safe_error(api_client):
    response = api_client.get("/v1/orders/123/secret-report")
    body = response.json()
    assert response.status_code == 404
    assert body["success"] is False
    assert body["error"] == "Not Found"
    assert body["path"] == "/v1/orders/123/secret-report"
