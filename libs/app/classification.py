# libs/app/classification.py
from __future__ import annotations

from typing import Callable, Tuple

from libs.app.database_errors import classify_database_error, is_database_error
from libs.app.errors import UNKNOWN_ERROR, ErrorClassification
from libs.app.http_errors import (
    classify_http_exception,
    classify_validation_error,
    is_http_exception,
    is_request_validation_error,
)
from libs.utils.logging_setup import app_logger as log

Predicate = Callable[[object], bool]
Classifier = Callable[[object], ErrorClassification]

# First match wins. Request-validation errors go first: their text echoes
# client input and must never reach the database message heuristics.
# Database checks run before the HTTP check, so an HTTP exception whose
# text carries a provider marker is reported as a database error.
CLASSIFICATION_RULES: Tuple[Tuple[Predicate, Classifier], ...] = (
    (is_request_validation_error, classify_validation_error),
    (is_database_error, classify_database_error),
    (is_http_exception, classify_http_exception),
)


def classify(error: object) -> ErrorClassification:
    """
    Maps any caught object to exactly one classification. Never raises:
    an error that cannot be classified is reported as UnknownError.
    """
    try:
        for matches, classify_as in CLASSIFICATION_RULES:
            if matches(error):
                return classify_as(error)
    except Exception:
        log.warning("Error classification failed, falling back to UnknownError", exc_info=True)
    return UNKNOWN_ERROR
