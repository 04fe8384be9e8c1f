# libs/app/exception_filter.py
"""
Global error boundary for HTTP services.

Every error that escapes a route handler ends here and becomes exactly one
SafeErrorResponse. The full error (message, traceback, chained causes,
database code) is written to the log and nowhere else.

Two entry points feed the same SafeExceptionFilter:
- ExceptionFilterMiddleware catches anything raised past the routing layer;
- handlers for HTTPException and RequestValidationError, which Starlette
  resolves itself before they could reach a middleware.
"""
from __future__ import annotations

import logging
from typing import Awaitable, Callable, Mapping, Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from libs.app.classification import classify
from libs.app.database_errors import database_error_code
from libs.app.errors import ErrorCategory, ErrorClassification, read_field, read_message
from libs.app.safe_response import compose_safe_response
from libs.utils.logging_setup import app_logger


class SafeExceptionFilter:
    def __init__(self, logger: logging.Logger = app_logger):
        self.logger = logger

    def catch(self, error: object, request: Request) -> JSONResponse:
        method = request.method
        path = request.url.path
        log_extra = {
            "req_id": getattr(request.state, "request_id", None),
            "method": method,
            "path": path,
        }

        self._log_error(error, method, path, log_extra)

        classification = classify(error)
        if classification.category is ErrorCategory.DATABASE:
            self._log_database_error(error, classification, log_extra)

        return compose_safe_response(
            status_code=classification.http_status,
            error_label=classification.error_label,
            message=classification.user_message,
            path=path,
            headers=self._response_headers(error, classification),
        )

    @staticmethod
    def _response_headers(error: object, classification: ErrorClassification) -> Optional[Mapping[str, str]]:
        # Allow on 405, WWW-Authenticate on 401
        if classification.category is not ErrorCategory.HTTP:
            return None
        try:
            headers = read_field(error, "headers")
            if not isinstance(headers, Mapping):
                return None
            return {str(name): str(value) for name, value in headers.items()}
        except Exception:
            return None

    def _log_error(self, error: object, method: str, path: str, log_extra: dict) -> None:
        try:
            if isinstance(error, BaseException):
                self.logger.error(
                    "[%s] %s - %s: %s",
                    method,
                    path,
                    type(error).__name__,
                    error,
                    exc_info=(type(error), error, error.__traceback__),
                    extra=log_extra,
                )
            else:
                self.logger.error("[%s] %s - %r", method, path, error, extra=log_extra)
        except Exception:
            # A broken log sink must not change the response
            pass

    def _log_database_error(
        self, error: object, classification: ErrorClassification, log_extra: dict
    ) -> None:
        try:
            code = classification.subcode or database_error_code(error)
            self.logger.error(
                "[DATABASE ERROR] Code: %s, Message: %s",
                code or "UNKNOWN",
                read_message(error),
                extra={**log_extra, "err_category": classification.category.value, "err_code": code},
            )
        except Exception:
            pass


class ExceptionFilterMiddleware(BaseHTTPMiddleware):
    """Turns any exception raised downstream into a safe JSON response."""

    def __init__(self, app: ASGIApp, exception_filter: SafeExceptionFilter):
        super().__init__(app)
        self.exception_filter = exception_filter

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return self.exception_filter.catch(exc, request)


def register_exception_filter(
    app: FastAPI, exception_filter: Optional[SafeExceptionFilter] = None
) -> SafeExceptionFilter:
    """
    Installs the error boundary on an app. Must be called before any
    middleware that should observe the final (sanitized) status code.
    """
    exception_filter = exception_filter or SafeExceptionFilter()

    async def handle_exception(request: Request, exc: Exception) -> JSONResponse:
        return exception_filter.catch(exc, request)

    app.add_exception_handler(StarletteHTTPException, handle_exception)
    app.add_exception_handler(RequestValidationError, handle_exception)
    app.add_middleware(ExceptionFilterMiddleware, exception_filter=exception_filter)
    app.state.exception_filter = exception_filter
    return exception_filter
