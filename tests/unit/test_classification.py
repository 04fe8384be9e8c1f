# tests/unit/test_classification.py
from types import SimpleNamespace

import pytest
from fastapi import HTTPException
from fastapi.exceptions import RequestValidationError

from libs.app.classification import CLASSIFICATION_RULES, classify
from libs.app.database_errors import is_database_error
from libs.app.http_errors import is_http_exception, is_request_validation_error
from libs.app.errors import UNEXPECTED_ERROR_MESSAGE, UNKNOWN_ERROR, ErrorCategory


class HostileError(Exception):
    """Raises on any attribute lookup that is not defined on the class."""

    def __getattr__(self, name):
        raise RuntimeError(f"cannot read {name}")


def test_validation_rule_runs_before_database_rule():
    predicates = [matches for matches, _ in CLASSIFICATION_RULES]
    assert predicates.index(is_request_validation_error) < predicates.index(is_database_error)
    assert predicates.index(is_database_error) < predicates.index(is_http_exception)


@pytest.mark.parametrize("value", ["prisma", "Invalid `x", "PrismaClient"])
def test_validation_error_echoing_provider_marker_stays_422(value):
    error = RequestValidationError(
        [{"type": "int_parsing", "loc": ("body", "tax_year"), "msg": "Input should be a valid integer", "input": value}]
    )

    classification = classify(error)

    assert classification.category is ErrorCategory.HTTP
    assert classification.http_status == 422


@pytest.mark.parametrize(
    "error, expected_category",
    [
        (SimpleNamespace(code="P2002", message="Unique constraint failed"), ErrorCategory.DATABASE),
        (HTTPException(status_code=404, detail="Form not found"), ErrorCategory.HTTP),
        (RequestValidationError([{"loc": ("body", "tax_year"), "msg": "Field required", "type": "missing"}]), ErrorCategory.HTTP),
        (ValueError("division by zero in refund estimate"), ErrorCategory.UNKNOWN),
        (SimpleNamespace(foo="bar"), ErrorCategory.UNKNOWN),
        ({"foo": "bar"}, ErrorCategory.UNKNOWN),
        (None, ErrorCategory.UNKNOWN),
    ],
)
def test_each_error_gets_exactly_one_category(error, expected_category):
    assert classify(error).category is expected_category


def test_unknown_error_is_fixed_500():
    classification = classify(SimpleNamespace(foo="bar"))

    assert classification == UNKNOWN_ERROR
    assert classification.http_status == 500
    assert classification.error_label == "Internal Server Error"
    assert classification.user_message == UNEXPECTED_ERROR_MESSAGE


def test_http_exception_with_provider_marker_is_classified_as_database_error():
    # Known misclassification: the message heuristic wins over the HTTP status.
    error = HTTPException(status_code=400, detail="Invalid `taxYear` value")
    assert classify(error).category is ErrorCategory.DATABASE


def test_classification_never_raises():
    classification = classify(HostileError("broken"))
    assert classification == UNKNOWN_ERROR


def test_classification_failure_is_logged_as_warning(monkeypatch):
    from libs.app import classification as classification_module

    warnings = []
    monkeypatch.setattr(classification_module.log, "warning", lambda *args, **kwargs: warnings.append(args))

    assert classify(HostileError("broken")) == UNKNOWN_ERROR
    assert len(warnings) == 1


def test_classification_is_deterministic():
    first = classify(SimpleNamespace(code="P2025", message="Record to delete does not exist."))
    second = classify(SimpleNamespace(code="P2025", message="Record to delete does not exist."))
    assert first == second
    assert first.http_status == 404
