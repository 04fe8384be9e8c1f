from __future__ import annotations
from typing import List, Literal, Union
from pydantic import BaseModel, ConfigDict, Field


class SafeErrorResponse(BaseModel):
    """
    Error body returned to clients. Must never carry stack traces, SQL,
    internal identifiers or provider-specific field names.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    success: Literal[False] = False
    status_code: int = Field(..., alias="statusCode", description="HTTP status of the response")
    error: str = Field(..., description="Status label, e.g. 'Not Found'")
    message: Union[str, List[str]] = Field(..., description="Client-safe message or list of messages")
    timestamp: str = Field(..., description="UTC time of the error, ISO-8601")
    path: str = Field(..., description="Request path that failed")
