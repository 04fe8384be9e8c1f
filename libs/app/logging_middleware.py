# libs/app/logging_middleware.py
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from typing import Callable, Awaitable

from libs.utils.ids import new_request_id
from libs.utils.logging_setup import app_logger as logger

REQUEST_ID_HEADER = "x-request-id"


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Access logging for HTTP requests.
    - Reuses the incoming X-Request-ID or generates one, and exposes it on
      request.state.request_id for the error boundary.
    - Measures request latency.
    - Writes one JSON log line per request.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
        request.state.request_id = request_id

        start_time = time.monotonic()
        response = await call_next(request)
        process_time = (time.monotonic() - start_time) * 1000  # ms

        log_extra = {
            "req_id": request_id,
            "path": request.url.path,
            "method": request.method,
            "status": response.status_code,
            "latency_ms": round(process_time, 2),
        }

        logger.info(
            f"HTTP {request.method} {request.url.path} - {response.status_code}",
            extra=log_extra,
        )

        response.headers[REQUEST_ID_HEADER] = request_id

        return response
