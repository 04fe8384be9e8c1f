# libs/app/http_errors.py
"""
Pass-through of intentional HTTP errors raised by route handlers.

The status is never remapped; only the message is normalized to a list so
clients always get the same shape for single and multi-field errors.
"""
from __future__ import annotations

from http import HTTPStatus
from typing import List, Mapping

from fastapi.exceptions import RequestValidationError

from libs.app.errors import (
    ErrorCategory,
    ErrorClassification,
    get_error_label,
    read_field,
)

VALIDATION_ERROR_STATUS = 422

# Only error statuses pass through; anything else is not an HTTP error
MIN_ERROR_STATUS = 400
MAX_ERROR_STATUS = 599


def is_http_exception(error: object) -> bool:
    status_code = read_field(error, "status_code")
    if not isinstance(status_code, int) or isinstance(status_code, bool):
        return False
    return MIN_ERROR_STATUS <= status_code <= MAX_ERROR_STATUS


def is_request_validation_error(error: object) -> bool:
    return isinstance(error, RequestValidationError)


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return get_error_label(status_code)


def _own_message(error: object, status_code: int) -> object:
    detail = read_field(error, "detail")
    if isinstance(detail, (str, list)):
        return detail
    message = read_field(error, "message")
    if isinstance(message, (str, list)):
        return message
    return _reason_phrase(status_code)


def _as_message_list(message: object) -> List[str]:
    if isinstance(message, list):
        return [item if isinstance(item, str) else str(item) for item in message]
    return [message if isinstance(message, str) else str(message)]


def classify_http_exception(error: object) -> ErrorClassification:
    status_code = read_field(error, "status_code")

    description = read_field(error, "detail")
    if description is None:
        description = read_field(error, "response")

    message = None
    if isinstance(description, Mapping):
        message = description.get("message")
    if not message:
        message = _own_message(error, status_code)

    return ErrorClassification(
        category=ErrorCategory.HTTP,
        http_status=status_code,
        user_message=_as_message_list(message),
        error_label=get_error_label(status_code),
    )


def _format_validation_error(err: dict) -> str:
    field = ".".join(str(loc) for loc in err.get("loc", ()))
    msg = err.get("msg", "Invalid value")
    return f"{field}: {msg}" if field else msg


def classify_validation_error(error: RequestValidationError) -> ErrorClassification:
    status_code = VALIDATION_ERROR_STATUS
    return ErrorClassification(
        category=ErrorCategory.HTTP,
        http_status=status_code,
        user_message=[_format_validation_error(err) for err in error.errors()],
        error_label=get_error_label(status_code),
    )
