# libs/app/health.py
from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel


class HealthStatus(BaseModel):
    status: str = "down"


router = APIRouter(tags=["Health"])


@router.get("/health/live", response_model=HealthStatus, summary="Liveness probe")
async def liveness_check():
    return HealthStatus(status="up")
