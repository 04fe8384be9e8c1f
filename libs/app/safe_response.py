# libs/app/safe_response.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Mapping, Optional, Union

from fastapi.responses import JSONResponse

from libs.domain.dto.errors import SafeErrorResponse


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def compose_safe_response(
    status_code: int,
    error_label: str,
    message: Union[str, List[str]],
    path: str,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    body = SafeErrorResponse(
        status_code=status_code,
        error=error_label,
        message=message,
        timestamp=utc_timestamp(),
        path=path,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True),
        headers=dict(headers) if headers else None,
    )
