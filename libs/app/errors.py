# libs/app/errors.py
from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import List, Optional, Union

from fastapi import status
from pydantic import BaseModel, ConfigDict


class ErrorCategory(str, Enum):
    DATABASE = "DatabaseError"
    HTTP = "HttpError"
    UNKNOWN = "UnknownError"


class ErrorClassification(BaseModel):
    """Result of classifying a caught error. Never leaves the process."""

    model_config = ConfigDict(frozen=True)

    category: ErrorCategory
    http_status: int
    user_message: Union[str, List[str]]
    error_label: str
    subcode: Optional[str] = None


UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."
UNKNOWN_ERROR_LABEL = "Error"

# Status -> label shown to clients in the "error" field
ERROR_STATUS_LABELS = MappingProxyType(
    {
        status.HTTP_400_BAD_REQUEST: "Bad Request",
        status.HTTP_401_UNAUTHORIZED: "Unauthorized",
        status.HTTP_403_FORBIDDEN: "Forbidden",
        status.HTTP_404_NOT_FOUND: "Not Found",
        status.HTTP_409_CONFLICT: "Conflict",
        422: "Unprocessable Entity",  # renamed across starlette releases
        status.HTTP_500_INTERNAL_SERVER_ERROR: "Internal Server Error",
        status.HTTP_502_BAD_GATEWAY: "Bad Gateway",
        status.HTTP_503_SERVICE_UNAVAILABLE: "Service Unavailable",
        status.HTTP_504_GATEWAY_TIMEOUT: "Gateway Timeout",
    }
)


def get_error_label(status_code: int) -> str:
    """Returns the client-facing label for a status, "Error" if not in the table."""
    return ERROR_STATUS_LABELS.get(status_code, UNKNOWN_ERROR_LABEL)


UNKNOWN_ERROR = ErrorClassification(
    category=ErrorCategory.UNKNOWN,
    http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    user_message=UNEXPECTED_ERROR_MESSAGE,
    error_label=get_error_label(status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def read_field(error: object, name: str) -> object:
    """
    Reads a semantic field from an error of arbitrary shape: attribute first,
    then mapping key. Missing fields are None.
    """
    value = getattr(error, name, None)
    if value is None and isinstance(error, dict):
        value = error.get(name)
    return value


def read_message(error: object) -> Optional[str]:
    message = read_field(error, "message")
    if isinstance(message, str):
        return message
    if isinstance(error, BaseException):
        return str(error)
    return None
