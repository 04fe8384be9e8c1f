# tests/conftest.py
from typing import Optional
from unittest.mock import Mock

import pytest
from fastapi import APIRouter, Request
from fastapi.testclient import TestClient
from pydantic import BaseModel
from starlette.requests import Request as StarletteRequest

from libs.app.bootstrap import create_service_app
from libs.app.exception_filter import SafeExceptionFilter


class TaxReturnIn(BaseModel):
    tax_year: int
    filing_status: str
    ssn_last4: str
    notes: Optional[str] = None


test_router = APIRouter()


@test_router.get("/raise")
async def raise_configured_error(request: Request):
    raise request.app.state.error_to_raise


@test_router.post("/returns")
async def create_return(body: TaxReturnIn):
    return {"tax_year": body.tax_year}


@pytest.fixture
def mock_logger() -> Mock:
    return Mock()


@pytest.fixture
def exception_filter(mock_logger: Mock) -> SafeExceptionFilter:
    return SafeExceptionFilter(logger=mock_logger)


@pytest.fixture
def app(exception_filter: SafeExceptionFilter):
    return create_service_app(
        service_name="taxdesk-test",
        include_rest_routers=[{"router": test_router, "prefix": "/api", "tags": ["Test"]}],
        exception_filter=exception_filter,
    )


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def raise_on_request(app):
    """Configures the error that GET /api/raise will raise."""

    def _configure(error: BaseException) -> None:
        app.state.error_to_raise = error

    return _configure


@pytest.fixture
def make_request():
    """Builds a bare Starlette request for calling the filter directly."""

    def _make(method: str = "GET", path: str = "/api/orders") -> StarletteRequest:
        scope = {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": b"",
            "headers": [],
        }
        return StarletteRequest(scope)

    return _make
