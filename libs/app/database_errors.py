# libs/app/database_errors.py
"""
Recognition and sanitization of persistence-layer errors.

Database failures reach the API in several incompatible shapes: typed
Prisma-style exceptions carrying a "P" code, plain objects or dicts relayed
from another process, wrapped fetch failures that only say so in the message,
and SQLAlchemy exceptions raised by our own repositories. Detection is the
union of independent predicates so that any one of these shapes is enough.

Everything the client sees comes from DATABASE_ERROR_MAP or the two fallback
messages below; the code and raw message only ever go to the log.
"""
from __future__ import annotations

import re
from types import MappingProxyType
from typing import NamedTuple, Optional

from fastapi import status
from sqlalchemy import exc as sa_exc

from libs.app.errors import (
    ErrorCategory,
    ErrorClassification,
    get_error_label,
    read_field,
    read_message,
)


class DatabaseErrorMapping(NamedTuple):
    status: int
    message: str


# Reference: https://www.prisma.io/docs/reference/api-reference/error-reference
DATABASE_ERROR_MAP = MappingProxyType(
    {
        # Connection
        "P1000": DatabaseErrorMapping(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "Database service is temporarily unavailable. Please try again in a moment.",
        ),
        "P1001": DatabaseErrorMapping(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "Unable to connect to the database. Please try again later.",
        ),
        "P1002": DatabaseErrorMapping(
            status.HTTP_504_GATEWAY_TIMEOUT,
            "Database connection timed out. Please try again.",
        ),
        "P1003": DatabaseErrorMapping(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "Database is not available. Please contact support if this persists.",
        ),
        "P1008": DatabaseErrorMapping(
            status.HTTP_504_GATEWAY_TIMEOUT,
            "Operation timed out. Please try again.",
        ),
        "P1017": DatabaseErrorMapping(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "Database connection was closed. Please try again.",
        ),
        # Query
        "P2000": DatabaseErrorMapping(
            status.HTTP_400_BAD_REQUEST,
            "The provided value is too long for this field.",
        ),
        "P2001": DatabaseErrorMapping(
            status.HTTP_404_NOT_FOUND,
            "The requested record does not exist.",
        ),
        "P2002": DatabaseErrorMapping(
            status.HTTP_409_CONFLICT,
            "This record already exists. Please use a different value.",
        ),
        "P2003": DatabaseErrorMapping(
            status.HTTP_400_BAD_REQUEST,
            "Invalid reference to related record.",
        ),
        "P2025": DatabaseErrorMapping(
            status.HTTP_404_NOT_FOUND,
            "Record not found.",
        ),
    }
)

# PostgreSQL SQLSTATE -> machine code of the table above
SQLSTATE_TO_CODE = MappingProxyType(
    {
        "23505": "P2002",  # unique_violation
        "23503": "P2003",  # foreign_key_violation
        "22001": "P2000",  # string_data_right_truncation
        "57014": "P1008",  # query_canceled
        "28P01": "P1000",  # invalid_password
        "08001": "P1001",  # sqlclient_unable_to_establish_sqlconnection
        "08003": "P1017",  # connection_does_not_exist
        "08006": "P1017",  # connection_failure
        "3D000": "P1003",  # invalid_catalog_name
    }
)

PROVIDER_NAME_MARKER = "Prisma"
PROVIDER_CODE_PATTERN = re.compile(r"^P\d+")
PROVIDER_MESSAGE_MARKERS = (
    "prisma",
    "PrismaClient",
    "Invalid `",
    "Cannot fetch data from service",
)
NETWORK_FAILURE_MARKERS = (
    "fetch failed",
    "ECONNREFUSED",
    "ETIMEDOUT",
    "Cannot fetch data",
)

NETWORK_FAILURE_MESSAGE = (
    "Database service is temporarily unavailable. Please try again in a few moments."
)
GENERIC_DATABASE_MESSAGE = "A database error occurred. Please try again or contact support."
GENERIC_DATABASE_LABEL = "Database Error"


# --- Predicates ---


def has_provider_name(error: object) -> bool:
    name = read_field(error, "name")
    if isinstance(name, str) and PROVIDER_NAME_MARKER in name:
        return True
    return PROVIDER_NAME_MARKER in type(error).__name__


def has_provider_code(error: object) -> bool:
    code = read_field(error, "code")
    return isinstance(code, str) and PROVIDER_CODE_PATTERN.match(code) is not None


def has_client_version(error: object) -> bool:
    return (
        read_field(error, "clientVersion") is not None
        or read_field(error, "client_version") is not None
    )


def has_provider_message(error: object) -> bool:
    message = read_message(error)
    return bool(message) and any(marker in message for marker in PROVIDER_MESSAGE_MARKERS)


def is_orm_error(error: object) -> bool:
    return isinstance(error, sa_exc.SQLAlchemyError)


DATABASE_ERROR_PREDICATES = (
    has_provider_name,
    has_provider_code,
    has_client_version,
    has_provider_message,
    is_orm_error,
)


def is_database_error(error: object) -> bool:
    return any(predicate(error) for predicate in DATABASE_ERROR_PREDICATES)


# --- Machine code ---


def _orm_error_code(error: sa_exc.SQLAlchemyError) -> Optional[str]:
    if isinstance(error, sa_exc.NoResultFound):
        return "P2025"
    if isinstance(error, sa_exc.TimeoutError):
        return "P1008"
    if isinstance(error, sa_exc.DisconnectionError):
        return "P1017"
    if isinstance(error, sa_exc.DBAPIError):
        # asyncpg exposes sqlstate, psycopg exposes pgcode
        sqlstate = getattr(error.orig, "sqlstate", None) or getattr(error.orig, "pgcode", None)
        if sqlstate in SQLSTATE_TO_CODE:
            return SQLSTATE_TO_CODE[sqlstate]
        if error.connection_invalidated:
            return "P1017"
    return None


def database_error_code(error: object) -> Optional[str]:
    """Returns the provider machine code of a database-shaped error, if any."""
    if is_orm_error(error):
        return _orm_error_code(error)
    code = read_field(error, "code")
    return code if isinstance(code, str) else None


def is_network_failure(error: object) -> bool:
    message = read_message(error)
    return bool(message) and any(marker in message for marker in NETWORK_FAILURE_MARKERS)


def classify_database_error(error: object) -> ErrorClassification:
    code = database_error_code(error)

    mapping = DATABASE_ERROR_MAP.get(code) if code else None
    if mapping is not None:
        return ErrorClassification(
            category=ErrorCategory.DATABASE,
            subcode=code,
            http_status=mapping.status,
            user_message=mapping.message,
            error_label=get_error_label(mapping.status),
        )

    if is_network_failure(error):
        return ErrorClassification(
            category=ErrorCategory.DATABASE,
            subcode=code,
            http_status=status.HTTP_503_SERVICE_UNAVAILABLE,
            user_message=NETWORK_FAILURE_MESSAGE,
            error_label=get_error_label(status.HTTP_503_SERVICE_UNAVAILABLE),
        )

    return ErrorClassification(
        category=ErrorCategory.DATABASE,
        subcode=code,
        http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        user_message=GENERIC_DATABASE_MESSAGE,
        error_label=GENERIC_DATABASE_LABEL,
    )
